"""company_rollup package.

Contains modules for loading audit score exports (CSV), rolling records up
to one row per company, and writing the rolled-up scores back to CSV for
download from the CLI or the Streamlit app.

Architecture:
- Parser → Rollup Engine → Exporter, composed linearly
- pandas handles the CSV boundary on both sides
- Pydantic models validate the rolled-up company rows
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
