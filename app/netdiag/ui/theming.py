import streamlit as st

MUTED = "#64748b"  # slate-500

# Warna badge per engine
SYSTEM_COLORS = {
    "bayesian": "#0ea5e9",
    "fuzzy": "#a855f7",
    "rule-based": "#22c55e",
}


def page_header(title: str, subtitle: str | None = None):
    st.markdown(f"<h2 style='margin-bottom:0.2rem'>{title}</h2>", unsafe_allow_html=True)
    if subtitle:
        st.markdown(f"<p style='color:{MUTED};margin-top:0'>{subtitle}</p>", unsafe_allow_html=True)


def pill(text: str, color: str = "#0ea5e9"):
    st.markdown(
        f"""
        <span style="
          padding:4px 10px;border-radius:9999px;
          background:{color}1f;color:{color};
          font-size:0.85rem;">{text}</span>
        """,
        unsafe_allow_html=True
    )


def system_pill(system_type: str):
    pill(f"Engine: {system_type}", SYSTEM_COLORS.get(system_type, "#0ea5e9"))
