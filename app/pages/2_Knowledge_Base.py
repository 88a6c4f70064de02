"""
Halaman untuk menjelajahi Knowledge Base diagnosis jaringan.

Memungkinkan pengguna untuk mencari dan melihat:
- Gejala dan kandidat penyebabnya
- Penyebab dan aksi rekomendasinya
- Aturan rule-based engine
- Aturan fuzzy engine

Menggunakan modul `search_filter` untuk logika pencarian.
"""
import streamlit as st
import pandas as pd

from netdiag.core.explanation import ExplanationFacility
from netdiag.core.fuzzy_engine import FUZZY_RULES
from netdiag.core.models import Cause, Symptom, Token
from netdiag.core.rule_engine import RULES
from netdiag.core import search_filter as sf
from netdiag.knowledge import actions_for, causes_for, symptoms_for
from netdiag.ui.theming import page_header


def show_symptoms_explorer():
    """Tampilkan UI untuk eksplorasi gejala."""
    st.subheader("Symptom Explorer")

    rows = []
    for symptom in Symptom:
        rows.append({
            "Symptom": symptom.label,
            "Candidate causes (most likely first)": ", ".join(c.label for c in causes_for(symptom)),
            "Related symptoms": ", ".join(s.label for s in sf.get_related_symptoms(symptom)),
        })
    st.dataframe(pd.DataFrame(rows), width="stretch", hide_index=True)


def show_causes_explorer():
    """Tampilkan UI untuk eksplorasi penyebab."""
    st.subheader("Cause Explorer")

    query = st.text_input("Search by cause name or action:", key="cause_query")
    results = sf.search_causes(query)

    st.write(f"Showing **{len(results)}** of **{len(Cause)}** causes.")

    if not results:
        st.warning("No cause matches your search.")
        return

    for cause in results:
        with st.expander(cause.label):
            st.markdown("**Recommended actions:**")
            for action in actions_for(cause):
                st.write(f"- {sf.highlight_search_term(action, query)}")
            st.caption("Reported by: " + ", ".join(s.label for s in symptoms_for(cause)))


def show_rules_explorer():
    """Tampilkan UI untuk eksplorasi aturan rule-based."""
    st.subheader("Rule Explorer")

    explainer = ExplanationFacility(RULES)

    col1, col2, col3 = st.columns(3)
    with col1:
        token_filter = st.selectbox(
            "Rules using token (IF):",
            options=[None] + list(Token),
            format_func=lambda t: "Any token" if t is None else f"{t.value}: {t.description}",
            key="rule_token",
        )
    with col2:
        cause_filter = st.selectbox(
            "Rules concluding (THEN):",
            options=[None] + list(Cause),
            format_func=lambda c: "Any cause" if c is None else c.label,
            key="rule_cause",
        )
    with col3:
        priority_max = st.slider("Maximum priority", 1, 4, 4, key="rule_priority")

    results = sf.search_rules(RULES, token_filter, cause_filter, priority_max)

    st.write(f"Showing **{len(results)}** of **{len(RULES)}** rules.")

    if not results:
        st.warning("No rule matches the selected filters.")
        return

    for rule in results:
        with st.expander(f"R{rule.id}: {rule.cause.label}"):
            st.markdown(explainer.explain_rule(rule.id))


def show_fuzzy_rules():
    st.subheader("Fuzzy Rules")
    rows = [
        {
            "Rule": f"F{rule.id}",
            "IF": " AND ".join(f"{dim} is {term}" for dim, term in rule.antecedents),
            "THEN": ", ".join(f"{cause.label} ({level})" for cause, level in rule.consequents),
            "Confidence": rule.confidence,
        }
        for rule in FUZZY_RULES
    ]
    st.dataframe(pd.DataFrame(rows), width="stretch", hide_index=True)


page_header("Knowledge Base", "Symptoms, causes, actions and rules used by the engines.")

tab1, tab2, tab3, tab4 = st.tabs(["Symptoms", "Causes", "Rules", "Fuzzy rules"])
with tab1:
    show_symptoms_explorer()
with tab2:
    show_causes_explorer()
with tab3:
    show_rules_explorer()
with tab4:
    show_fuzzy_rules()
