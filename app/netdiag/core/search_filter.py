"""Modul Search & Filter untuk Knowledge Base.

Fungsi read-only untuk eksplorasi KB di UI:
- Pencarian teks pada label cause dan aksi
- Filter rules berdasarkan token kondisi, cause, atau batas prioritas
- Reverse lookup: gejala -> kemungkinan cause, gejala terkait
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from ..knowledge import ACTIONS, SYMPTOM_CAUSES, causes_for
from .models import Cause, Rule, Symptom, Token
from .rule_engine import RULES


def _normalize_text(text: str) -> str:
    """Normalisasi teks untuk pencarian: lowercase, hapus karakter khusus."""
    if not text:
        return ""
    text = text.lower().replace("_", " ").replace("-", " ")
    text = re.sub(r"[^a-z0-9\s]", "", text)
    return " ".join(text.split())


def _matches_text(values: Sequence[str], query: Optional[str]) -> bool:
    if not query:
        return True
    normalized_query = _normalize_text(query)
    return any(normalized_query in _normalize_text(v) for v in values)


def search_causes(query: Optional[str] = None) -> List[Cause]:
    """Cari cause berdasarkan label atau isi aksi rekomendasinya."""
    return [
        cause for cause in Cause
        if _matches_text([cause.label, cause.name, *ACTIONS.get(cause, ())], query)
    ]


def search_rules(
    rules: Sequence[Rule] = RULES,
    token_filter: Optional[Token] = None,
    cause_filter: Optional[Cause] = None,
    priority_max: Optional[int] = None,
) -> List[Rule]:
    """Filter rules; hasil diurutkan (priority, id) seperti urutan seleksi engine."""
    results = []
    for rule in rules:
        if token_filter is not None and token_filter not in rule.conditions:
            continue
        if cause_filter is not None and rule.cause is not cause_filter:
            continue
        if priority_max is not None and rule.priority > priority_max:
            continue
        results.append(rule)
    results.sort(key=lambda r: (r.priority, r.id))
    return results


def get_rules_by_token(token: Token, rules: Sequence[Rule] = RULES) -> List[Rule]:
    """Dapatkan semua rules yang memakai token tertentu."""
    return search_rules(rules, token_filter=token)


def get_rules_by_cause(cause: Cause, rules: Sequence[Rule] = RULES) -> List[Rule]:
    """Dapatkan semua rules yang menghasilkan cause tertentu."""
    return search_rules(rules, cause_filter=cause)


def get_possible_causes(symptoms: Sequence[Symptom]) -> List[Cause]:
    """Gabungan kandidat cause dari gejala yang dipilih (urutan ditemukan)."""
    possible = {}
    for symptom in symptoms:
        for cause in causes_for(symptom):
            possible.setdefault(cause, None)
    return list(possible)


def get_related_symptoms(symptom: Symptom) -> List[Symptom]:
    """Gejala lain yang berbagi minimal satu kandidat cause dengan gejala ini."""
    own = set(causes_for(symptom))
    return [
        other for other, causes in SYMPTOM_CAUSES.items()
        if other is not symptom and own & set(causes)
    ]


def highlight_search_term(text: str, query: str) -> str:
    """Highlight query di dalam text untuk tampilan UI (gunakan markdown bold)."""
    if not query or not text:
        return text
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    return pattern.sub(lambda m: f"**{m.group(0)}**", text)
