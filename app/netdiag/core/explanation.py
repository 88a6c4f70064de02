from typing import Any, Dict, List, Sequence, Tuple
from dataclasses import dataclass, field

from .models import Cause, MembershipProfile, Rule, Symptom, Token


@dataclass
class AppliedRule:
    """Satu aturan yang cocok (exact/partial) selama diagnosis rule-based."""
    rule_id: int
    cause: Cause
    priority: int
    match: str  # 'exact' atau 'partial'
    present: List[Token] = field(default_factory=list)
    missing: List[Token] = field(default_factory=list)
    selected: bool = True  # False jika cause sudah diwakili aturan sebelumnya

    def to_row(self) -> Dict[str, Any]:
        """Convert ke format dict untuk UI."""
        return {
            "rule": f"R{self.rule_id}",
            "cause": self.cause.label,
            "priority": self.priority,
            "match": self.match,
            "present": ", ".join(t.value for t in self.present),
            "missing": ", ".join(t.value for t in self.missing),
            "selected": self.selected,
        }


class ExplanationFacility:
    """Fasilitas penjelasan untuk ketiga engine.

    1. WHY: Mengapa sebuah aturan ada (kondisi -> cause)
    2. HOW: Bagaimana rule-based engine sampai pada urutan hasilnya
    3. Ringkasan frekuensi dan tabel derajat keanggotaan fuzzy
    """

    def __init__(self, rules: Sequence[Rule] = ()):
        self.rules: Dict[int, Rule] = {rule.id: rule for rule in rules}

    # ============== WHY EXPLANATION ==============

    def explain_rule(self, rule_id: int) -> str:
        """Jelaskan mengapa aturan ini digunakan."""
        rule = self.rules.get(rule_id)
        if not rule:
            return f"Rule R{rule_id} not found."

        explanation = f"""
**Rule R{rule.id}** (priority {rule.priority})

**IF:**
{self._format_conditions(rule.conditions)}

**THEN:** {rule.cause.label}
"""
        return explanation.strip()

    # ============== HOW EXPLANATION ==============

    def explain_applied_rules(self, applied: Sequence[AppliedRule]) -> str:
        """Langkah-langkah: aturan exact dulu, lalu partial, urut prioritas."""
        if not applied:
            return "No rule matched the observed symptoms."

        explanation = "**How the result was reached:**\n\n"
        for step, rule in enumerate(applied, start=1):
            status = "used" if rule.selected else "cause already listed"
            explanation += (
                f"**Step {step}:** R{rule.rule_id} ({rule.match} match, priority "
                f"{rule.priority}) -> {rule.cause.label} [{status}]\n"
                f"- Present: {', '.join(t.value for t in rule.present) or '-'}\n"
            )
            if rule.missing:
                explanation += f"- Missing: {', '.join(t.value for t in rule.missing)}\n"
            explanation += "\n"
        return explanation.strip()

    def explain_frequency(self, ranking: Sequence[Tuple[Cause, int]]) -> str:
        if not ranking:
            return "No symptoms were reported."
        lines = ["**Causes by number of supporting symptoms:**", ""]
        for cause, count in ranking:
            noun = "symptom" if count == 1 else "symptoms"
            lines.append(f"- {cause.label}: {count} {noun}")
        return "\n".join(lines)

    # ============== DATA PRESENTATION HELPERS ==============

    def membership_rows(self, profile: MembershipProfile) -> List[Dict[str, Any]]:
        """Flatten profil keanggotaan ke baris tabel (dimension, term, degree)."""
        return [
            {"dimension": dimension, "term": term, "degree": round(degree, 3)}
            for dimension, terms in profile.items()
            for term, degree in terms.items()
        ]

    def get_symptom_details(self, symptoms: Sequence[Symptom]) -> List[Dict[str, str]]:
        return [{"id": s.name, "nama": s.label} for s in symptoms]

    # ============== HELPER METHODS ==============

    def _format_conditions(self, conditions) -> str:
        formatted = []
        for token in sorted(conditions, key=lambda t: t.value):
            formatted.append(f"  - {token.description} ({token.value})")
        return "\n".join(formatted)
