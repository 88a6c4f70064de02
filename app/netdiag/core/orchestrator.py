"""Diagnosis Orchestrator.

Memilih engine sesuai SystemType lalu menyeragamkan hasilnya:
- frequency & rule-based: probabilitas sintetis berbasis ranking
- fuzzy: koreksi DNS berbasis pengukuran mentah
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Union

from ..knowledge import GENERAL_ACTIONS, GENERAL_PROBLEM, actions_for
from .frequency_engine import FrequencyEngine
from .fuzzy_engine import FuzzyEngine, symptoms_to_input
from .models import Cause, CauseResult, DiagnosisResult, FuzzyInput, Symptom, SystemType
from .rule_engine import RuleBasedEngine

DiagnosisInput = Union[Sequence[Symptom], FuzzyInput]


@dataclass(frozen=True)
class OrchestratorSettings:
    default_system: SystemType = SystemType.FREQUENCY
    rank_start: int = 90
    rank_step: int = 15
    rank_floor: int = 20
    dns_threshold: float = 5.0
    dns_probability: int = 85

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "OrchestratorSettings":
        """Bangun settings dari section `diagnosis` config YAML."""
        diagnosis = (config or {}).get("diagnosis", {}) or {}
        rank = diagnosis.get("rank_probability", {}) or {}
        dns = diagnosis.get("fuzzy_dns", {}) or {}
        defaults = cls()
        return cls(
            default_system=SystemType.parse(diagnosis.get("default_system", defaults.default_system.value)),
            rank_start=int(rank.get("start", defaults.rank_start)),
            rank_step=int(rank.get("step", defaults.rank_step)),
            rank_floor=int(rank.get("floor", defaults.rank_floor)),
            dns_threshold=float(dns.get("threshold", defaults.dns_threshold)),
            dns_probability=int(dns.get("probability", defaults.dns_probability)),
        )


class DiagnosisOrchestrator:
    """Satu pintu masuk untuk ketiga engine."""

    def __init__(
        self,
        settings: Optional[OrchestratorSettings] = None,
        frequency_engine: Optional[FrequencyEngine] = None,
        fuzzy_engine: Optional[FuzzyEngine] = None,
        rule_engine: Optional[RuleBasedEngine] = None,
    ):
        self.settings = settings or OrchestratorSettings()
        self.frequency_engine = frequency_engine or FrequencyEngine()
        self.fuzzy_engine = fuzzy_engine or FuzzyEngine()
        self.rule_engine = rule_engine or RuleBasedEngine()

    def diagnose(self, data: DiagnosisInput, system_type: Optional[SystemType] = None) -> DiagnosisResult:
        system_type = SystemType.parse(system_type or self.settings.default_system)

        if system_type is SystemType.FUZZY:
            return self._diagnose_fuzzy(data)

        if isinstance(data, FuzzyInput):
            raise TypeError(f"{system_type.value} engine expects a sequence of symptoms")

        if system_type is SystemType.RULE_BASED:
            result = self.rule_engine.diagnose(data)
        else:
            result = self.frequency_engine.diagnose(data)
        return self.apply_rank_probabilities(result)

    # ============== ADAPTASI HASIL ==============

    def rank_probability(self, rank: int) -> int:
        """Probabilitas tampilan untuk posisi `rank` (0 = teratas)."""
        s = self.settings
        return max(s.rank_floor, s.rank_start - s.rank_step * rank)

    def apply_rank_probabilities(self, result: DiagnosisResult) -> DiagnosisResult:
        """Tambahkan probabilitas sintetis yang menurun per ranking.

        Ini heuristik tampilan, BUKAN estimasi statistik: engine frequency dan
        rule-based hanya menghasilkan urutan. Certainty = probabilitas teratas.
        """
        causes = [
            replace(cause, probability=self.rank_probability(i))
            for i, cause in enumerate(result.causes)
        ]
        return replace(
            result,
            causes=causes,
            certainty=float(causes[0].probability) if causes else None,
        )

    def _diagnose_fuzzy(self, data: DiagnosisInput) -> DiagnosisResult:
        if isinstance(data, FuzzyInput):
            inputs = data
        else:
            symptoms = list(data)
            if not symptoms:
                return DiagnosisResult(
                    system_type=SystemType.FUZZY,
                    causes=[CauseResult(GENERAL_PROBLEM, GENERAL_ACTIONS)],
                )
            inputs = symptoms_to_input(symptoms)

        result = self.fuzzy_engine.diagnose(inputs)
        return self.apply_dns_correction(result, inputs)

    def apply_dns_correction(self, result: DiagnosisResult, inputs: FuzzyInput) -> DiagnosisResult:
        """Paksa 'Bad DNS configuration' ke posisi pertama jika dns_errors tinggi.

        Dibaca dari pengukuran mentah, bukan dari derajat keanggotaan.
        Entri DNS bernilai 0% diganti entri default (dns_probability).
        """
        if not inputs.dns_errors > self.settings.dns_threshold:
            return result

        label = Cause.BAD_DNS_CONFIG.label
        existing = [c for c in result.causes if c.cause == label and c.probability != 0]
        others: List[CauseResult] = [c for c in result.causes if c.cause != label]
        dns_entry = existing[0] if existing else CauseResult(
            label, actions_for(Cause.BAD_DNS_CONFIG), self.settings.dns_probability
        )
        return replace(result, causes=[dns_entry] + others)
