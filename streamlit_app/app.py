from __future__ import annotations

import pandas as pd
import streamlit as st
import altair as alt

from company_rollup.config import get_settings
from company_rollup.logging_config import configure_logging
from company_rollup.export.write_csv import format_records, to_csv_bytes
from company_rollup.ingest.parse_csv import InputParseError
from company_rollup.aggregate.rollup import MissingGroupKeyError
from company_rollup.session import RollupSession

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="CSV Company Rollup", layout="wide")
st.title("📊 CSV Company Rollup")

try:
    settings = get_settings()
except RuntimeError as exc:
    st.error(str(exc))
    st.stop()

configure_logging(settings.log_path, settings.log_level)

# =====================================================
# Session (one per browser session)
# =====================================================
if "rollup_session" not in st.session_state:
    st.session_state["rollup_session"] = RollupSession()
session: RollupSession = st.session_state["rollup_session"]

# =====================================================
# Helpers
# =====================================================
def center_dataframe(df: pd.DataFrame):
    """Center-align column headers and values for display."""
    return (
        df.style
        .set_properties(**{"text-align": "center"})
        .set_table_styles(
            [{"selector": "th", "props": [("text-align", "center")]}]
        )
    )

# =====================================================
# SECTION 1 — LOAD FILE
# =====================================================
st.header("📂 Load Audit Export")

uploaded = st.file_uploader("Audit results CSV", type=["csv"])

if uploaded is None:
    # uploader cleared
    session.clear()
    st.session_state["loaded_file_id"] = None
elif st.session_state.get("loaded_file_id") != uploaded.file_id:
    try:
        n = session.load(uploaded)
        st.session_state["loaded_file_id"] = uploaded.file_id
        st.success(f"Loaded {n} records from `{uploaded.name}`.")
    except InputParseError as exc:
        st.error(f"Could not read `{uploaded.name}`: {exc}")

st.divider()

# =====================================================
# SECTION 2 — PROCESS & DOWNLOAD
# =====================================================
st.header("🏢 Rolled-up Company Scores")

if not session.is_loaded:
    st.info("Load a CSV file to roll it up by company.")
    st.stop()

try:
    rows = session.process() or []
except MissingGroupKeyError as exc:
    st.error(str(exc))
    st.stop()

st.download_button(
    "Process & Download CSV",
    data=to_csv_bytes(rows),
    file_name=settings.output_name,
    mime="text/csv",
)

if not rows:
    st.warning("No rows with an `Associated Company Name` were found.")
    st.stop()

df_out = pd.DataFrame(rows)
df_chart = df_out[["Company Name", "Audit Score", "Count"]]

chart = (
    alt.Chart(df_chart)
    .mark_bar()
    .encode(
        x=alt.X("Company Name:N", sort=None, title=None),
        y=alt.Y("Audit Score:Q", title="Audit Score", scale=alt.Scale(domain=[0, 1])),
        tooltip=["Company Name:N", "Audit Score:Q", "Count:Q"],
    )
    .properties(height=320)
)
st.altair_chart(chart, width="stretch")

st.dataframe(
    center_dataframe(format_records(rows)),
    width="stretch",
)

# =====================================================
# Footer
# =====================================================
st.caption("Groups are listed in the order companies first appear in the file.")
