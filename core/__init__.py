"""Core (UI-agnostic) exam results logic.

This package contains:
- dataset loading (CSV over HTTP -> pandas) and CSV export
- record normalization and score parsing
- ranking, table queries (search/filter/sort) and grouped statistics
- chart helpers (Altair -> Vega-Lite spec dict)
"""
