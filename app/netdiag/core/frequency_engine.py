"""Frequency Engine ("bayesian-like").

Meranking penyebab berdasarkan berapa banyak gejala yang menunjuk ke
penyebab tersebut. Bukan inferensi Bayes sungguhan: tidak ada prior,
likelihood, maupun update posterior. Hanya menghitung frekuensi.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..knowledge import GENERAL_ACTIONS, GENERAL_PROBLEM, actions_for, causes_for
from .models import Cause, CauseResult, DiagnosisResult, Symptom, SystemType


class FrequencyEngine:
    """Ranking penyebab dengan menghitung gejala yang mengimplikasikannya."""

    def rank(self, symptoms: Sequence[Symptom]) -> List[Tuple[Cause, int]]:
        """Urutkan penyebab dan kembalikan pasangan (cause, count).

        Urutan:
        1. count menurun
        2. tie-break: posisi di daftar kandidat gejala PERTAMA; penyebab yang
           tidak ada di daftar itu diletakkan setelahnya sesuai urutan ditemukan
        3. Jika gejala DNS error ada, BAD_DNS_CONFIG dipaksa ke depan
        """
        distinct = list(dict.fromkeys(symptoms))
        if not distinct:
            return []

        counts: Dict[Cause, int] = {}
        encounter: Dict[Cause, int] = {}
        for symptom in distinct:
            for cause in causes_for(symptom):
                counts[cause] = counts.get(cause, 0) + 1
                encounter.setdefault(cause, len(encounter))

        first_list = causes_for(distinct[0])

        def tie_rank(cause: Cause) -> int:
            if cause in first_list:
                return first_list.index(cause)
            return len(first_list) + encounter[cause]

        ranked = sorted(counts, key=lambda c: (-counts[c], tie_rank(c)))

        if Symptom.DNS_ERROR in distinct and Cause.BAD_DNS_CONFIG in ranked:
            if ranked[0] is not Cause.BAD_DNS_CONFIG:
                ranked.remove(Cause.BAD_DNS_CONFIG)
                ranked.insert(0, Cause.BAD_DNS_CONFIG)

        return [(cause, counts[cause]) for cause in ranked]

    def diagnose(self, symptoms: Sequence[Symptom]) -> DiagnosisResult:
        """Diagnosis dari daftar gejala. Tanpa probabilitas (ditambah orchestrator)."""
        ranking = self.rank(symptoms)

        if not ranking:
            return DiagnosisResult(
                system_type=SystemType.FREQUENCY,
                causes=[CauseResult(GENERAL_PROBLEM, GENERAL_ACTIONS)],
            )

        return DiagnosisResult(
            system_type=SystemType.FREQUENCY,
            causes=[CauseResult(cause.label, actions_for(cause)) for cause, _ in ranking],
        )
