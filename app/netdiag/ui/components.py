import streamlit as st
import pandas as pd
from typing import Dict, List, Optional

from ..core.explanation import ExplanationFacility
from ..core.models import FUZZY_RANGES, DiagnosisResult, FuzzyInput, Symptom, SystemType

SYSTEM_LABELS = {
    SystemType.FREQUENCY: "Frequency (bayesian-like)",
    SystemType.FUZZY: "Fuzzy logic",
    SystemType.RULE_BASED: "Rule-based",
}

MEASUREMENT_LABELS = {
    "connectivity": "Connectivity (%)",
    "throughput": "Throughput (Mbps)",
    "packet_loss": "Packet loss (%)",
    "dns_errors": "DNS errors (per hour)",
    "wifi_signal": "Wi-Fi signal (%)",
    "page_load": "Page load time (ms)",
    "server_latency": "Internal server latency (ms)",
}


def system_selector(default: SystemType = SystemType.FREQUENCY) -> SystemType:
    options = list(SystemType)
    choice = st.radio(
        "Inference engine",
        options,
        index=options.index(default),
        format_func=lambda s: SYSTEM_LABELS[s],
        horizontal=True,
    )
    return choice


def symptom_multiselect(max_select: int = 7, default: Optional[List[Symptom]] = None) -> List[Symptom]:
    selected = st.multiselect(
        "Observed symptoms",
        options=list(Symptom),
        default=default or [],
        format_func=lambda s: s.label,
        help="Select every problem you can observe on the network.",
    )
    if len(selected) > max_select:
        st.warning(f"At most {max_select} symptoms.")
        selected = selected[:max_select]
    return selected


def measurement_sliders(base: FuzzyInput) -> Dict[str, float]:
    """Slider untuk 7 pengukuran fuzzy. Hanya nilai yang diubah yang dikembalikan."""
    values = base.to_dict()
    changed: Dict[str, float] = {}
    cols = st.columns(2)
    for i, (name, (low, high)) in enumerate(FUZZY_RANGES.items()):
        with cols[i % 2]:
            value = st.slider(
                MEASUREMENT_LABELS[name],
                min_value=float(low),
                max_value=float(high),
                value=float(values[name]),
            )
        if value != values[name]:
            changed[name] = value
    return changed


def result_cards(result: DiagnosisResult):
    if result.certainty is not None:
        st.metric("Certainty", f"{result.certainty:.1f}%")

    if not result.has_evidence:
        st.warning("No rule fired for these measurements: there is no evidence for any cause.")
        st.dataframe(
            pd.DataFrame([{"cause": c.cause, "probability": c.probability} for c in result.causes]),
            width="stretch",
            hide_index=True,
        )
        return

    for rank, cause in enumerate(result.causes, start=1):
        title = f"{rank}. {cause.cause}"
        if cause.probability is not None:
            title += f" ({cause.probability}%)"
        with st.expander(title, expanded=rank == 1):
            if cause.probability is not None:
                st.progress(min(100, max(0, cause.probability)) / 100)
            st.markdown("**Recommended actions:**")
            for action in cause.actions:
                st.write(f"- {action}")


def explanation_expander(result: DiagnosisResult, facility: ExplanationFacility, ranking=None):
    """Menampilkan penjelasan HOW sesuai engine yang dipakai."""
    with st.expander("How was this result reached?"):
        if result.applied_rules:
            st.markdown(facility.explain_applied_rules(result.applied_rules))
            st.dataframe(
                pd.DataFrame([r.to_row() for r in result.applied_rules]),
                width="stretch",
                hide_index=True,
            )
        elif result.memberships:
            st.write("Membership degree of every linguistic term:")
            df = pd.DataFrame(facility.membership_rows(result.memberships))
            st.dataframe(df[df["degree"] > 0], width="stretch", hide_index=True)
        else:
            if ranking:
                st.markdown(facility.explain_frequency(ranking))
            st.caption(
                "Ranking by number of supporting symptoms. Probabilities are a "
                "display heuristic based on rank, not a statistical estimate."
            )
