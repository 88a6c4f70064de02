"""Fuzzy Engine.

Pipeline:
1. Fuzzifikasi: 7 pengukuran kontinu -> derajat keanggotaan linguistik
   (trapmf / trimf)
2. Evaluasi 26 aturan: aktivasi = min(antecedent) x confidence, tiap
   consequent mendapat aktivasi x bobot level (low 0.1, medium 0.5, high 0.9)
3. Agregasi MAX per penyebab (bukan penjumlahan)
4. Normalisasi ke persentase integer
5. Ranking + certainty
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Dict, List, Optional, Sequence, Tuple

from ..knowledge import actions_for
from .models import (
    Cause,
    CauseResult,
    DiagnosisResult,
    FuzzyInput,
    MembershipProfile,
    Symptom,
    SystemType,
)


LEVEL_WEIGHTS: Dict[str, float] = {"low": 0.1, "medium": 0.5, "high": 0.9}

MIN_CERTAINTY = 60.0


def trapmf(x: float, a: float, b: float, c: float, d: float) -> float:
    """Fungsi keanggotaan trapesium.

    Naik linear dari 0 di `a` ke 1 di `b`, tetap 1 sampai `c`, turun ke 0 di `d`.
    Set bahu (a == b atau c == d) bernilai 1 tepat di tepi domain.
    """
    if b <= x <= c:
        return 1.0
    if x <= a or x >= d:
        return 0.0
    if x < b:
        return (x - a) / (b - a)
    return (d - x) / (d - c)


def trimf(x: float, a: float, b: float, c: float) -> float:
    """Fungsi keanggotaan segitiga dengan puncak di `b`."""
    if x == b:
        return 1.0
    if x <= a or x >= c:
        return 0.0
    if x < b:
        return (x - a) / (b - a)
    return (c - x) / (c - b)


# dimensi -> term -> (jenis fungsi, parameter)
MEMBERSHIP_FUNCTIONS: Dict[str, Dict[str, Tuple[str, Tuple[float, ...]]]] = {
    "connectivity": {
        "none": ("trap", (0, 0, 10, 30)),
        "intermittent": ("trap", (10, 30, 60, 85)),
        "stable": ("trap", (60, 85, 100, 100)),
    },
    "throughput": {
        "low": ("trap", (0, 0, 5, 15)),
        "medium": ("trap", (5, 15, 40, 60)),
        "high": ("trap", (40, 60, 100, 100)),
    },
    "packet_loss": {
        "low": ("trap", (0, 0, 1, 3)),
        "medium": ("trap", (1, 3, 8, 15)),
        "high": ("trap", (8, 15, 100, 100)),
    },
    "dns_errors": {
        "none": ("trap", (0, 0, 0.5, 1)),
        "occasional": ("tri", (0.5, 2, 4)),
        "frequent": ("trap", (2, 4, 6, 8)),
        "critical": ("trap", (6, 8, 10, 10)),
    },
    "wifi_signal": {
        "weak": ("trap", (0, 0, 20, 40)),
        "moderate": ("tri", (20, 50, 80)),
        "strong": ("trap", (60, 80, 100, 100)),
    },
    "page_load": {
        "fast": ("trap", (0, 0, 500, 1500)),
        "slow": ("trap", (500, 1500, 2500, 3500)),
        "very_slow": ("trap", (2500, 3500, 5000, 5000)),
    },
    "server_latency": {
        "low": ("trap", (0, 0, 50, 150)),
        "medium": ("trap", (50, 150, 500, 1000)),
        "high": ("trap", (500, 1000, 5000, 5000)),
    },
}


@dataclass(frozen=True)
class FuzzyRule:
    """IF semua (dimensi, term) THEN (cause, level) ... dengan confidence."""
    id: int
    antecedents: Tuple[Tuple[str, str], ...]
    consequents: Tuple[Tuple[Cause, str], ...]
    confidence: float = 1.0


_ALL_MEDIUM = tuple((cause, "medium") for cause in Cause)

FUZZY_RULES: Tuple[FuzzyRule, ...] = (
    # Putus total, jalur bersih -> router / ISP
    FuzzyRule(1, (("connectivity", "none"), ("packet_loss", "low"), ("dns_errors", "none")),
              ((Cause.ROUTER_FAILURE, "high"), (Cause.ISP_PROBLEMS, "high")), 1.2),
    FuzzyRule(2, (("connectivity", "none"), ("packet_loss", "high")),
              ((Cause.ROUTER_FAILURE, "high"), (Cause.DEFECTIVE_HARDWARE, "medium"))),
    FuzzyRule(3, (("connectivity", "none"), ("wifi_signal", "weak")),
              ((Cause.WIFI_INTERFERENCE, "medium"), (Cause.ROUTER_FAILURE, "medium"))),
    FuzzyRule(4, (("connectivity", "none"), ("wifi_signal", "strong")),
              ((Cause.ISP_PROBLEMS, "high"), (Cause.ROUTER_FAILURE, "medium"),
               (Cause.INFRASTRUCTURE_FAILURE, "medium"))),
    # Koneksi putus-nyambung
    FuzzyRule(5, (("connectivity", "intermittent"), ("wifi_signal", "weak")),
              ((Cause.WIFI_INTERFERENCE, "high"), (Cause.DEFECTIVE_HARDWARE, "low")), 1.3),
    FuzzyRule(6, (("connectivity", "intermittent"), ("wifi_signal", "strong"), ("packet_loss", "high")),
              ((Cause.DEFECTIVE_HARDWARE, "high"), (Cause.ROUTER_FAILURE, "medium"))),
    FuzzyRule(7, (("connectivity", "intermittent"), ("packet_loss", "medium")),
              ((Cause.ROUTER_FAILURE, "medium"), (Cause.NETWORK_CONGESTION, "medium"))),
    FuzzyRule(8, (("connectivity", "intermittent"), ("packet_loss", "low")),
              ((Cause.WIFI_INTERFERENCE, "medium"), (Cause.DEFECTIVE_HARDWARE, "medium"),
               (Cause.ROUTER_FAILURE, "low"))),
    # Packet loss
    FuzzyRule(9, (("packet_loss", "high"), ("throughput", "low")),
              ((Cause.DEFECTIVE_HARDWARE, "high"), (Cause.NETWORK_CONGESTION, "medium"))),
    FuzzyRule(10, (("packet_loss", "high"), ("wifi_signal", "weak")),
              ((Cause.WIFI_INTERFERENCE, "high"), (Cause.DEFECTIVE_HARDWARE, "medium"))),
    FuzzyRule(11, (("packet_loss", "medium"), ("page_load", "slow")),
              ((Cause.NETWORK_CONGESTION, "high"), (Cause.ISP_PROBLEMS, "low"))),
    # DNS
    FuzzyRule(12, (("dns_errors", "frequent"),),
              ((Cause.BAD_DNS_CONFIG, "high"), (Cause.ISP_PROBLEMS, "medium"))),
    FuzzyRule(13, (("dns_errors", "critical"),),
              ((Cause.BAD_DNS_CONFIG, "high"), (Cause.MALWARE, "medium")), 1.5),
    FuzzyRule(14, (("dns_errors", "occasional"), ("page_load", "slow")),
              ((Cause.BAD_DNS_CONFIG, "medium"), (Cause.ISP_PROBLEMS, "medium"))),
    FuzzyRule(15, (("dns_errors", "frequent"), ("connectivity", "stable")),
              ((Cause.BAD_DNS_CONFIG, "high"),), 1.3),
    # Wi-Fi lemah tapi link stabil
    FuzzyRule(16, (("wifi_signal", "weak"), ("connectivity", "stable")),
              ((Cause.WIFI_INTERFERENCE, "high"), (Cause.ROUTER_FAILURE, "low"))),
    # Halaman lambat
    FuzzyRule(17, (("connectivity", "stable"), ("throughput", "low"), ("page_load", "very_slow")),
              ((Cause.NETWORK_CONGESTION, "high"), (Cause.ISP_PROBLEMS, "medium")), 1.2),
    FuzzyRule(18, (("connectivity", "stable"), ("throughput", "high"), ("page_load", "slow")),
              ((Cause.SERVER_OVERLOAD, "medium"), (Cause.MALWARE, "medium"))),
    # Server internal
    FuzzyRule(19, (("server_latency", "high"), ("connectivity", "stable")),
              ((Cause.SERVER_OVERLOAD, "high"),), 1.2),
    FuzzyRule(20, (("server_latency", "high"), ("page_load", "very_slow")),
              ((Cause.SERVER_OVERLOAD, "high"), (Cause.INFRASTRUCTURE_FAILURE, "medium"))),
    FuzzyRule(21, (("server_latency", "high"), ("throughput", "low"), ("page_load", "slow")),
              ((Cause.MALWARE, "high"), (Cause.NETWORK_CONGESTION, "medium"))),
    FuzzyRule(22, (("server_latency", "medium"), ("packet_loss", "medium")),
              ((Cause.NETWORK_CONGESTION, "medium"), (Cause.INFRASTRUCTURE_FAILURE, "low"))),
    FuzzyRule(23, (("server_latency", "high"), ("packet_loss", "high"), ("connectivity", "intermittent")),
              ((Cause.INFRASTRUCTURE_FAILURE, "high"), (Cause.ROUTER_FAILURE, "medium")), 1.2),
    # Throughput rendah padahal Wi-Fi kuat dan tanpa loss -> upstream
    FuzzyRule(24, (("throughput", "low"), ("wifi_signal", "strong"), ("packet_loss", "low")),
              ((Cause.ISP_PROBLEMS, "high"), (Cause.NETWORK_CONGESTION, "medium"))),
    FuzzyRule(25, (("dns_errors", "occasional"), ("server_latency", "high"), ("page_load", "very_slow")),
              ((Cause.MALWARE, "high"), (Cause.SERVER_OVERLOAD, "medium")), 1.2),
    # Semua input di wilayah tengah: ambigu, semua penyebab medium
    FuzzyRule(26, (("connectivity", "intermittent"), ("throughput", "medium"), ("packet_loss", "medium"),
                   ("dns_errors", "occasional"), ("wifi_signal", "moderate"), ("page_load", "slow"),
                   ("server_latency", "medium")),
              _ALL_MEDIUM),
)


# Bacaan pengukuran untuk tiap gejala diskrit (dipakai saat caller hanya
# mengirim gejala ke fuzzy engine)
SYMPTOM_READINGS: Dict[Symptom, Dict[str, float]] = {
    Symptom.NO_INTERNET: {"connectivity": 0.0, "throughput": 0.0},
    Symptom.PACKET_LOSS: {"packet_loss": 25.0, "connectivity": 50.0},
    Symptom.DNS_ERROR: {"dns_errors": 6.5},
    Symptom.SLOW_PAGE_LOAD: {"page_load": 3000.0, "throughput": 10.0},
    Symptom.WEAK_WIFI: {"wifi_signal": 15.0},
    Symptom.INTERMITTENT: {"connectivity": 45.0},
    Symptom.SLOW_INTERNAL_SERVER: {"server_latency": 1500.0},
}

# Dimensi di mana nilai lebih kecil berarti lebih buruk
_LOWER_IS_WORSE = {"connectivity", "throughput", "wifi_signal"}


def symptoms_to_input(symptoms: Sequence[Symptom]) -> FuzzyInput:
    """Konversi gejala diskrit ke pengukuran.

    Mulai dari baseline sehat; tiap dimensi mengambil nilai TERBURUK dari
    semua gejala sehingga hasilnya tidak tergantung urutan input.
    """
    values = FuzzyInput().to_dict()
    for symptom in symptoms:
        for dimension, reading in SYMPTOM_READINGS.get(symptom, {}).items():
            if dimension in _LOWER_IS_WORSE:
                values[dimension] = min(values[dimension], reading)
            else:
                values[dimension] = max(values[dimension], reading)
    return FuzzyInput(**values)


def _aggregate_max(acc: Dict[Cause, float], contribution: Dict[Cause, float]) -> Dict[Cause, float]:
    merged = dict(acc)
    for cause, value in contribution.items():
        merged[cause] = max(merged.get(cause, 0.0), value)
    return merged


def compute_certainty(percentages: List[int]) -> float:
    """Certainty untuk penyebab teratas.

    Distribusi yang rapat menurunkan certainty ke 60, distribusi dengan satu
    pemimpin jelas menaikkannya ke persentase pemimpin tersebut.
    """
    if len(percentages) < 2:
        return 100.0 if percentages else 95.0
    mean = sum(percentages) / len(percentages)
    mad = sum(abs(p - mean) for p in percentages) / len(percentages)
    top = max(percentages)
    return max(MIN_CERTAINTY, top - max(0.0, 20.0 - mad))


class FuzzyEngine:
    """Fuzzy inference engine untuk diagnosis berbasis pengukuran."""

    def __init__(self, rules: Sequence[FuzzyRule] = FUZZY_RULES):
        self.rules = tuple(rules)

    def fuzzify(self, inputs: FuzzyInput) -> MembershipProfile:
        """Hitung derajat keanggotaan tiap term untuk tiap dimensi."""
        values = inputs.clamped().to_dict()
        profile: MembershipProfile = {}
        for dimension, terms in MEMBERSHIP_FUNCTIONS.items():
            x = values[dimension]
            profile[dimension] = {}
            for term, (kind, params) in terms.items():
                fn = trapmf if kind == "trap" else trimf
                profile[dimension][term] = fn(x, *params)
        return profile

    def fire_rule(self, rule: FuzzyRule, profile: MembershipProfile) -> Dict[Cause, float]:
        """Aktivasi satu aturan -> kontribusi per penyebab."""
        activation = min(profile[dim][term] for dim, term in rule.antecedents) * rule.confidence
        if activation <= 0.0:
            return {}
        return {cause: activation * LEVEL_WEIGHTS[level] for cause, level in rule.consequents}

    def evaluate_rules(self, profile: MembershipProfile) -> Dict[Cause, float]:
        """Evaluasi semua aturan lalu agregasi MAX per penyebab (fold)."""
        return reduce(
            _aggregate_max,
            (self.fire_rule(rule, profile) for rule in self.rules),
            {},
        )

    def normalize(self, aggregated: Dict[Cause, float]) -> Dict[Cause, int]:
        """Normalisasi ke persentase integer untuk SEMUA penyebab.

        Total 0 -> normalisasi dilewati, semua penyebab 0%.
        """
        total = sum(aggregated.values())
        if total <= 0.0:
            return {cause: 0 for cause in Cause}
        return {
            cause: int(round(aggregated.get(cause, 0.0) / total * 100))
            for cause in Cause
        }

    def diagnose(self, inputs: FuzzyInput, profile: Optional[MembershipProfile] = None) -> DiagnosisResult:
        profile = profile or self.fuzzify(inputs)
        percentages = self.normalize(self.evaluate_rules(profile))

        # penyebab 0% tetap ikut, di ekor sesuai urutan deklarasi
        order = list(Cause)
        ranked = sorted(percentages, key=lambda c: (-percentages[c], order.index(c)))

        causes = [
            CauseResult(cause.label, actions_for(cause), percentages[cause])
            for cause in ranked
        ]
        # certainty hanya dihitung dari penyebab yang punya bukti (> 0%)
        evidence = [c.probability for c in causes if c.probability > 0]
        return DiagnosisResult(
            system_type=SystemType.FUZZY,
            causes=causes,
            certainty=round(compute_certainty(evidence), 1),
            memberships={
                dim: {term: round(degree, 3) for term, degree in terms.items()}
                for dim, terms in profile.items()
            },
        )
