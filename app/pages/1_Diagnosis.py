import streamlit as st
from pathlib import Path

from netdiag.core.explanation import ExplanationFacility
from netdiag.core.frequency_engine import FrequencyEngine
from netdiag.core.fuzzy_engine import symptoms_to_input
from netdiag.core.models import SystemType
from netdiag.core.rule_engine import RULES
from netdiag.services.api import DiagnosisRequest, DiagnosisService
from netdiag.services.config import load_config
from netdiag.services.reporting import ReportingService
from netdiag.ui.components import (
    explanation_expander,
    measurement_sliders,
    result_cards,
    symptom_multiselect,
    system_selector,
)
from netdiag.ui.theming import page_header, system_pill


# --- Backend Initialization ---
@st.cache_resource
def get_config():
    return load_config()

@st.cache_resource
def get_service():
    return DiagnosisService(config=get_config())

@st.cache_resource
def get_reporter():
    return ReportingService(output_dir=get_config()["reports"]["output_dir"])

@st.cache_resource
def get_explainer():
    return ExplanationFacility(RULES)


def reset_diagnosis_state():
    """Resets all session state variables related to a diagnosis run."""
    st.session_state.diagnosis_result = None
    st.session_state.diagnosis_request = None


def _download(label: str, path: str, mime: str):
    get_service().logging_service.log_info(f"Report generated: {path}")
    with open(path, "rb") as f:
        st.download_button(label, f.read(), file_name=Path(path).name, mime=mime, width="stretch")


# --- Main App Logic ---
def run():
    page_header("Diagnosis", "Select the observed symptoms and run an inference engine.")

    config = get_config()
    service = get_service()
    reporter = get_reporter()
    explainer = get_explainer()

    if 'diagnosis_result' not in st.session_state:
        reset_diagnosis_state()

    default_system = service.orchestrator.settings.default_system

    # --- Input ---
    if st.session_state.diagnosis_result is None:
        system_type = system_selector(default_system)
        system_pill(system_type.value)

        symptoms = symptom_multiselect(max_select=config["ui"]["max_symptoms_selectable"])

        measurements = {}
        if system_type is SystemType.FUZZY:
            with st.expander("Adjust measurements (optional)"):
                st.caption("Sliders start from the readings implied by the selected symptoms.")
                measurements = measurement_sliders(symptoms_to_input(symptoms))

        st.divider()

        if st.button("🔎 Run diagnosis", type="primary", width="stretch"):
            request = DiagnosisRequest(
                symptoms=symptoms,
                system_type=system_type,
                measurements=measurements or None,
            )
            try:
                with st.spinner("Running inference..."):
                    st.session_state.diagnosis_result = service.run(request)
                    st.session_state.diagnosis_request = request
            except Exception as e:
                service.logging_service.log_error("Diagnosis failed in UI", e)
                st.error(f"Diagnosis failed: {e}")
            else:
                st.rerun()

    # --- Result ---
    else:
        result = st.session_state.diagnosis_result
        request = st.session_state.diagnosis_request

        system_pill(result.system_type.value)
        if request.symptoms:
            st.write("**Symptoms:** " + ", ".join(s.label for s in request.symptoms))

        result_cards(result)

        if config["ui"]["show_explanation"]:
            ranking = None
            if result.system_type is SystemType.FREQUENCY:
                ranking = FrequencyEngine().rank(request.symptoms)
            explanation_expander(result, explainer, ranking)

        st.divider()
        st.markdown("#### 📄 Reports")
        cols = st.columns(3)
        with cols[0]:
            if st.button("TXT", width="stretch"):
                _download("Download TXT", reporter.generate_txt_report(result, request.symptoms), "text/plain")
        with cols[1]:
            if st.button("CSV", width="stretch"):
                _download("Download CSV", reporter.generate_csv_report(result), "text/csv")
        with cols[2]:
            if st.button("PDF", width="stretch"):
                _download("Download PDF", reporter.generate_pdf_report(result, request.symptoms), "application/pdf")

        if st.button("🔄 New diagnosis", width="stretch"):
            reset_diagnosis_state()
            st.rerun()


run()
