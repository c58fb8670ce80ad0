"""Core (UI-agnostic) project tracker logic.

This package contains:
- workbook decoding (XLS/XLSX bytes -> row records)
- field lookup and badge classification
- chart dataset aggregation
- selection state shared by the Streamlit app and the API
- chart helpers (Altair -> Vega-Lite spec dict)
"""
