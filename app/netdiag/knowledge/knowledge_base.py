"""Knowledge Base statis untuk diagnosis masalah jaringan.

Modul ini adalah satu-satunya sumber data untuk:
- Relasi Symptom -> Cause (urutan = kemungkinan relatif, dipakai untuk tie-break)
- Katalog aksi rekomendasi per Cause
- Diagnosis generik (fallback) yang dipakai oleh beberapa engine

Semua tabel dibungkus MappingProxyType sehingga read-only, dan invariant
dicek sekali saat modul di-import.
"""

from types import MappingProxyType
from typing import List, Mapping, Tuple

from ..core.models import Cause, Symptom


class KnowledgeBaseError(ValueError):
    """Knowledge base tidak konsisten (invariant dilanggar)."""


SYMPTOM_CAUSES: Mapping[Symptom, Tuple[Cause, ...]] = MappingProxyType({
    Symptom.NO_INTERNET: (
        Cause.ROUTER_FAILURE,
        Cause.ISP_PROBLEMS,
        Cause.DEFECTIVE_HARDWARE,
        Cause.INFRASTRUCTURE_FAILURE,
    ),
    Symptom.PACKET_LOSS: (
        Cause.DEFECTIVE_HARDWARE,
        Cause.ROUTER_FAILURE,
        Cause.NETWORK_CONGESTION,
        Cause.ISP_PROBLEMS,
    ),
    Symptom.DNS_ERROR: (
        Cause.BAD_DNS_CONFIG,
        Cause.ISP_PROBLEMS,
        Cause.MALWARE,
    ),
    Symptom.SLOW_PAGE_LOAD: (
        Cause.NETWORK_CONGESTION,
        Cause.ISP_PROBLEMS,
        Cause.MALWARE,
        Cause.SERVER_OVERLOAD,
    ),
    Symptom.WEAK_WIFI: (
        Cause.WIFI_INTERFERENCE,
        Cause.ROUTER_FAILURE,
        Cause.DEFECTIVE_HARDWARE,
    ),
    Symptom.INTERMITTENT: (
        Cause.WIFI_INTERFERENCE,
        Cause.DEFECTIVE_HARDWARE,
        Cause.ROUTER_FAILURE,
        Cause.ISP_PROBLEMS,
    ),
    Symptom.SLOW_INTERNAL_SERVER: (
        Cause.SERVER_OVERLOAD,
        Cause.MALWARE,
        Cause.NETWORK_CONGESTION,
        Cause.INFRASTRUCTURE_FAILURE,
    ),
})


ACTIONS: Mapping[Cause, Tuple[str, ...]] = MappingProxyType({
    Cause.ROUTER_FAILURE: (
        "Restart the router",
        "Check the router's LED indicators",
        "Update the router firmware",
        "Restore the factory configuration",
        "Replace the router if the problem persists",
    ),
    Cause.ISP_PROBLEMS: (
        "Contact the service provider",
        "Check the service status page of the ISP",
        "Request a remote line diagnosis",
        "Check for scheduled outages in the area",
    ),
    Cause.DEFECTIVE_HARDWARE: (
        "Visually inspect cables and connectors",
        "Replace damaged cables",
        "Verify that the switches work correctly",
        "Check the network cards of the affected devices",
    ),
    Cause.BAD_DNS_CONFIG: (
        "Verify the configured DNS servers",
        "Configure alternative DNS servers (8.8.8.8, 1.1.1.1)",
        "Review the DHCP configuration",
        "Flush the DNS cache on the devices",
    ),
    Cause.WIFI_INTERFERENCE: (
        "Change the Wi-Fi channel",
        "Relocate the router",
        "Install Wi-Fi repeaters",
        "Reduce interference (microwaves, cordless phones)",
        "Use the 5 GHz band if available",
    ),
    Cause.SERVER_OVERLOAD: (
        "Restart the server",
        "Check resource usage (CPU, memory)",
        "Review the running processes",
        "Optimize high-consumption applications",
    ),
    Cause.MALWARE: (
        "Run an antivirus scan on all devices",
        "Update the security software",
        "Review devices showing anomalous behaviour",
        "Enforce stricter security policies",
    ),
    Cause.NETWORK_CONGESTION: (
        "Review and optimize bandwidth usage",
        "Implement QoS to prioritize traffic",
        "Look for devices consuming excessive bandwidth",
        "Schedule large transfers for off-peak hours",
    ),
    Cause.INFRASTRUCTURE_FAILURE: (
        "Check the state of the core router or switch",
        "Verify the main network equipment",
        "Check the power supply of the devices",
        "Review the error logs of the core equipment",
    ),
})


GENERAL_PROBLEM = "General network problem"
GENERAL_ACTIONS: Tuple[str, ...] = (
    "Restart all network equipment",
    "Check physical connections",
    "Contact technical support",
)

UNIDENTIFIED_PROBLEM = "Unidentified problem"
UNIDENTIFIED_ACTIONS: Tuple[str, ...] = (
    "Restart all network equipment",
    "Check physical connections",
    "Run basic connectivity tests",
    "Contact technical support for a detailed diagnosis",
)


def causes_for(symptom: Symptom) -> Tuple[Cause, ...]:
    """Kandidat penyebab untuk satu gejala, urut dari yang paling mungkin."""
    return SYMPTOM_CAUSES.get(symptom, ())


def actions_for(cause: Cause) -> Tuple[str, ...]:
    return ACTIONS.get(cause, ())


def symptoms_for(cause: Cause) -> List[Symptom]:
    """Reverse lookup: gejala apa saja yang menunjuk ke penyebab ini."""
    return [s for s, causes in SYMPTOM_CAUSES.items() if cause in causes]


def validate_knowledge_base(
    symptom_causes: Mapping[Symptom, Tuple[Cause, ...]] = SYMPTOM_CAUSES,
    actions: Mapping[Cause, Tuple[str, ...]] = ACTIONS,
) -> None:
    """Cek invariant knowledge base.

    - Setiap Symptom punya minimal satu Cause
    - Setiap Cause bisa dicapai dari minimal satu Symptom
    - Setiap Cause punya daftar aksi yang tidak kosong

    Raises:
        KnowledgeBaseError: berisi semua pelanggaran yang ditemukan.
    """
    problems = []

    for symptom in Symptom:
        if not symptom_causes.get(symptom):
            problems.append(f"symptom '{symptom.label}' has no causes")

    reachable = {c for causes in symptom_causes.values() for c in causes}
    for cause in Cause:
        if cause not in reachable:
            problems.append(f"cause '{cause.label}' is not reachable from any symptom")
        if not actions.get(cause):
            problems.append(f"cause '{cause.label}' has no actions")

    if problems:
        raise KnowledgeBaseError("Invalid knowledge base: " + "; ".join(problems))


validate_knowledge_base()
