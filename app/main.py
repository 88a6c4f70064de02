import streamlit as st

from netdiag.core.fuzzy_engine import FUZZY_RULES
from netdiag.core.models import Cause, Symptom
from netdiag.core.rule_engine import RULES
from netdiag.services.config import load_config


@st.cache_resource
def get_config():
    return load_config()


CONFIG = get_config()

st.set_page_config(
    page_title=CONFIG["app"]["name"],
    page_icon="📡",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Sidebar hanya untuk informasi, tidak ada navigasi manual
st.sidebar.title("📡 " + CONFIG["app"]["name"])
st.sidebar.caption("Frontend GUI – Streamlit")

st.sidebar.divider()
st.sidebar.markdown("### ⚙️ Configuration")
st.sidebar.info(f"**Default engine:** {CONFIG['diagnosis']['default_system']}")
st.sidebar.info(f"**Fuzzy DNS threshold:** {CONFIG['diagnosis']['fuzzy_dns']['threshold']} errors/hour")
st.sidebar.info(f"**Reports:** `{CONFIG['reports']['output_dir']}`")

# Konten halaman utama
st.title("📡 Network Problem Diagnosis")
st.markdown("### Find the probable root cause of a network problem")

col1, col2 = st.columns([2, 1])

with col1:
    st.markdown("""
    This expert system maps the symptoms you observe on a network onto a ranked
    list of probable causes, each with concrete remediation actions.

    #### 🎯 How it works:
    1. **Select the symptoms** you can observe
    2. **Choose an inference engine**
    3. Optionally **adjust measurements** for the fuzzy engine
    4. **Review the ranked causes** and the recommended actions
    """)

with col2:
    st.info(f"""
    **📊 Knowledge Base**

    - 🔴 **{len(Symptom)} Symptoms**
    - 🟢 **{len(Cause)} Causes**
    - 🔵 **{len(RULES)} Rules**
    - 🟣 **{len(FUZZY_RULES)} Fuzzy rules**
    """)
    st.success("✅ System ready")

st.divider()

st.markdown("### 🧠 Inference Engines")

engine_cols = st.columns(3)

with engine_cols[0]:
    st.markdown("#### Frequency (bayesian-like)")
    st.markdown("""
    Counts how many of the observed symptoms point at each cause. Causes backed
    by more symptoms rank higher. A reported DNS error always puts the DNS
    configuration first.
    """)

with engine_cols[1]:
    st.markdown("#### Fuzzy logic")
    st.markdown("""
    Turns symptoms (or explicit measurements) into seven continuous readings,
    evaluates 26 fuzzy rules and normalizes the result into percentages with a
    certainty score.
    """)

with engine_cols[2]:
    st.markdown("#### Rule-based")
    st.markdown("""
    Translates symptoms into symbolic facts, infers derived facts, and matches
    IF-THEN rules: exact matches first, partial matches after, by priority.
    """)

st.divider()

st.caption("""
💡 **Start a diagnosis** from the **Diagnosis** page in the sidebar →
""")
