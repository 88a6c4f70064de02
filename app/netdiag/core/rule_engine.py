"""Rule-Based Engine.

Pipeline:
- translate: gejala UI -> token simbolik (+ token kombinasi)
- infer: forward chaining implikasi token sampai fixpoint di WorkingMemory
- match: exact (semua kondisi ada) / partial (sebagian kondisi ada)
- select: exact dulu lalu partial, masing-masing urut prioritas, dedup per cause
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Tuple

from ..knowledge import (
    GENERAL_ACTIONS,
    GENERAL_PROBLEM,
    UNIDENTIFIED_ACTIONS,
    UNIDENTIFIED_PROBLEM,
    actions_for,
)
from .explanation import AppliedRule
from .models import Cause, CauseResult, DiagnosisResult, Rule, Symptom, SystemType, Token
from .working_memory import WorkingMemory


def _rule(rule_id: int, conditions: Iterable[Token], cause: Cause, priority: int) -> Rule:
    return Rule(rule_id, frozenset(conditions), cause, priority)


# Prioritas: angka kecil = lebih penting
RULES: Tuple[Rule, ...] = (
    _rule(1, {Token.NO_INTERNET, Token.PING_FAILS}, Cause.ROUTER_FAILURE, 1),
    _rule(2, {Token.NO_INTERNET, Token.PING_OK}, Cause.BAD_DNS_CONFIG, 2),
    _rule(3, {Token.INTERMITTENT, Token.WIFI}, Cause.WIFI_INTERFERENCE, 3),
    _rule(4, {Token.INTERMITTENT, Token.CABLE}, Cause.DEFECTIVE_HARDWARE, 3),
    _rule(5, {Token.DAMAGED_CABLE}, Cause.DEFECTIVE_HARDWARE, 2),
    _rule(6, {Token.PAGES_DONT_LOAD, Token.DNS_ERROR}, Cause.BAD_DNS_CONFIG, 2),
    _rule(7, {Token.SLOW_UPLOAD}, Cause.NETWORK_CONGESTION, 4),
    _rule(8, {Token.SLOW_SERVER}, Cause.SERVER_OVERLOAD, 3),
    _rule(9, {Token.PACKET_LOSS}, Cause.DEFECTIVE_HARDWARE, 2),
    _rule(10, {Token.MULTIPLE_USERS_AFFECTED}, Cause.INFRASTRUCTURE_FAILURE, 1),
    _rule(11, {Token.WEAK_WIFI}, Cause.WIFI_INTERFERENCE, 3),
    _rule(12, {Token.ISP_MAINTENANCE, Token.PROBLEMS_PERSIST}, Cause.ISP_PROBLEMS, 4),
    _rule(13, {Token.DNS_ERROR, Token.BAD_DNS_CONFIG}, Cause.BAD_DNS_CONFIG, 1),
    _rule(14, {Token.PAGES_DONT_LOAD, Token.PACKET_LOSS}, Cause.NETWORK_CONGESTION, 3),
    _rule(15, {Token.SLOW_SERVER, Token.PAGES_DONT_LOAD, Token.HIGH_RESOURCE_USAGE}, Cause.MALWARE, 4),
)

SYMPTOM_TOKENS: Mapping[Symptom, Token] = {
    Symptom.NO_INTERNET: Token.NO_INTERNET,
    Symptom.PACKET_LOSS: Token.PACKET_LOSS,
    Symptom.DNS_ERROR: Token.DNS_ERROR,
    Symptom.SLOW_PAGE_LOAD: Token.PAGES_DONT_LOAD,
    Symptom.WEAK_WIFI: Token.WEAK_WIFI,
    Symptom.INTERMITTENT: Token.INTERMITTENT,
    Symptom.SLOW_INTERNAL_SERVER: Token.SLOW_SERVER,
}

IMPLICATIONS: Mapping[Token, Tuple[Token, ...]] = {
    Token.NO_INTERNET: (Token.PAGES_DONT_LOAD,),
    Token.DNS_ERROR: (Token.PAGES_DONT_LOAD, Token.BAD_DNS_CONFIG),
    Token.WEAK_WIFI: (Token.WIFI,),
    Token.PACKET_LOSS: (Token.INTERMITTENT,),
}

# Token kombinasi: dihasilkan translate dari dua gejala sekaligus
COMBINATION_TOKENS: FrozenSet[Token] = frozenset({Token.PING_FAILS, Token.PING_OK, Token.WIFI})


class RuleBasedEngine:
    """Engine simbolik: pencocokan himpunan token terhadap aturan IF-THEN."""

    def __init__(self, rules: Sequence[Rule] = RULES):
        self.rules = tuple(rules)

    def translate(self, symptoms: Sequence[Symptom]) -> List[Token]:
        """Satu token per gejala, ditambah token kombinasi."""
        present = set(symptoms)
        tokens = [SYMPTOM_TOKENS[s] for s in dict.fromkeys(symptoms) if s in SYMPTOM_TOKENS]

        if Symptom.NO_INTERNET in present:
            if Symptom.PACKET_LOSS in present:
                tokens.append(Token.PING_FAILS)
            else:
                tokens.append(Token.PING_OK)
        if Symptom.INTERMITTENT in present and Symptom.WEAK_WIFI in present:
            tokens.append(Token.WIFI)
        return tokens

    def infer(self, tokens: Iterable[Token]) -> FrozenSet[Token]:
        """Forward chaining implikasi sampai tidak ada token baru (fixpoint)."""
        return self.build_memory(tokens).get_tokens()

    def build_memory(self, tokens: Iterable[Token]) -> WorkingMemory:
        """WorkingMemory baru per panggilan: token user, kombinasi, dan hasil inferensi."""
        memory = WorkingMemory()
        pending: List[Token] = []
        for token in tokens:
            source = "combination" if token in COMBINATION_TOKENS else "user"
            if memory.add_token(token, source=source):
                pending.append(token)

        while pending:
            token = pending.pop(0)
            for derived in IMPLICATIONS.get(token, ()):
                if memory.add_token(derived, source="inference", derived_from=token):
                    pending.append(derived)

        return memory

    def match(self, tokens: FrozenSet[Token]) -> Tuple[List[Rule], List[Rule]]:
        """Pisahkan aturan menjadi (exact, partial), masing-masing urut prioritas."""
        exact: List[Rule] = []
        partial: List[Rule] = []
        for rule in self.rules:
            if rule.conditions <= tokens:
                exact.append(rule)
            elif rule.conditions & tokens:
                partial.append(rule)

        def order(rule: Rule) -> Tuple[int, int]:
            return (rule.priority, rule.id)

        return sorted(exact, key=order), sorted(partial, key=order)

    def diagnose(self, symptoms: Sequence[Symptom]) -> DiagnosisResult:
        translated = self.translate(symptoms)
        if not translated:
            return DiagnosisResult(
                system_type=SystemType.RULE_BASED,
                causes=[CauseResult(GENERAL_PROBLEM, GENERAL_ACTIONS)],
            )

        tokens = self.infer(translated)
        exact, partial = self.match(tokens)

        if not exact and not partial:
            return DiagnosisResult(
                system_type=SystemType.RULE_BASED,
                causes=[CauseResult(UNIDENTIFIED_PROBLEM, UNIDENTIFIED_ACTIONS)],
            )

        causes: List[CauseResult] = []
        applied: List[AppliedRule] = []
        seen: Dict[Cause, int] = {}

        for match_kind, rules in (("exact", exact), ("partial", partial)):
            for rule in rules:
                selected = rule.cause not in seen
                if selected:
                    seen[rule.cause] = rule.id
                    causes.append(CauseResult(rule.cause.label, actions_for(rule.cause)))
                applied.append(AppliedRule(
                    rule_id=rule.id,
                    cause=rule.cause,
                    priority=rule.priority,
                    match=match_kind,
                    present=sorted(rule.conditions & tokens, key=lambda t: t.value),
                    missing=sorted(rule.conditions - tokens, key=lambda t: t.value),
                    selected=selected,
                ))

        return DiagnosisResult(
            system_type=SystemType.RULE_BASED,
            causes=causes,
            applied_rules=applied,
        )
