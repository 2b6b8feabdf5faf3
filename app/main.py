"""
Streamlit Console for Ledger Reports

The operator-facing surface of the report engine.

DESIGN PRINCIPLES:
1. Generation is fire-and-forget - the page never blocks on a run
2. Status is always visible and always current on refresh
3. A failed report says why it failed
4. Written reports can be inspected without leaving the page
"""

import asyncio

import streamlit as st

from ledger_reports.audit import InMemoryAuditSink
from ledger_reports.classification import accounts_in
from ledger_reports.config import get_settings, validate_all_settings
from ledger_reports.engine import ReportEngine, create_engine
from ledger_reports.models import AccountCategory, JobState, ReportName


# Page configuration
st.set_page_config(
    page_title="Ledger Reports",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

STATE_ICONS = {
    JobState.IDLE: "⚪",
    JobState.RUNNING: "⏳",
    JobState.SUCCEEDED: "✅",
    JobState.FAILED: "❌",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_engine() -> tuple[ReportEngine, InMemoryAuditSink]:
    """Get or create the engine (cached, so job state survives reruns)."""
    sink = InMemoryAuditSink()
    return create_engine(audit_sink=sink), sink


def main():
    """Main application entry point."""
    engine, sink = get_engine()

    st.sidebar.title("📒 Ledger Reports")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Reports", "🧾 Activity", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Drop ledger CSV files in the input directory
        2. Press *Generate Reports*
        3. Refresh to follow progress
        """
    )

    if page == "📊 Reports":
        render_reports_page(engine)
    elif page == "🧾 Activity":
        render_activity_page(sink)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_reports_page(engine: ReportEngine):
    """Render the generation and status page."""
    st.title("📊 Reports")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("▶️ Generate Reports", type="primary", disabled=engine.tracker.is_running()):
            response = engine.start_generation()
            st.success(f"Processing started ({response['correlation_id'][:8]})")
    with col2:
        if st.button("🔄 Refresh Status"):
            st.rerun()

    st.markdown("---")

    for report in ReportName:
        status = engine.tracker.status(report)
        icon = STATE_ICONS[status.state]
        st.markdown(f"**{icon} {report.filename}** : {status.describe()}")

        if status.state == JobState.SUCCEEDED:
            path = engine.writer.path_for(report)
            with st.expander(f"Preview {report.filename}"):
                try:
                    st.code(path.read_text(), language="text")
                except OSError as e:
                    st.warning(f"Could not read {path}: {e}")


def render_activity_page(sink: InMemoryAuditSink):
    """Render recent audit events."""
    st.title("🧾 Activity")

    events = run_async(sink.get_recent_events(limit=50))
    if not events:
        st.info("No report activity yet.")
        return

    for event in events:
        line = f"`{event.timestamp:%H:%M:%S}` {event.description}"
        if event.error_message:
            line += f" - {event.error_message}"
        st.markdown(line)


def render_settings_page():
    """Render configuration status and the account taxonomy."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name, key in [("Report settings", "reports"), ("Input directory", "input_dir"), ("Logging", "logging")]:
        if status.get(key, False):
            st.success(f"✅ {name}")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    if status.get("reports"):
        reports = get_settings().reports
        st.markdown(f"**Input directory:** `{reports.input_dir}`")
        st.markdown(f"**Output directory:** `{reports.output_dir}`")

    st.markdown("---")
    st.markdown("### Account Taxonomy")
    for category in AccountCategory:
        if category == AccountCategory.UNCLASSIFIED:
            continue
        st.markdown(f"**{category.value}:** {', '.join(accounts_in(category))}")
    st.caption("Any other account name is reported as Unclassified.")


if __name__ == "__main__":
    main()
