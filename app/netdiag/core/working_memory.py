"""
Working Memory Module
Menyimpan token (fakta) selama satu kali inferensi rule-based.
Satu instance per panggilan diagnose, tidak pernah dibagi antar panggilan.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from .models import Token


@dataclass
class Fact:
    """Representasi satu token dalam working memory"""
    token: Token
    source: str = "user"  # 'user', 'combination' atau 'inference'
    derived_from: Optional[Token] = None


class WorkingMemory:
    """
    Working Memory untuk rule-based engine
    Menyimpan token hasil translasi gejala dan token hasil inferensi
    """

    def __init__(self):
        self.facts: Dict[Token, Fact] = {}
        self.metadata: Dict[str, int] = {
            "user_tokens_count": 0,
            "combination_count": 0,
            "inference_count": 0,
        }

    def add_token(self, token: Token, source: str = "user", derived_from: Optional[Token] = None) -> bool:
        """
        Menambahkan token ke working memory

        Returns:
            True jika token baru, False jika sudah ada (fakta pertama dipertahankan)
        """
        if token in self.facts:
            return False
        self.facts[token] = Fact(token=token, source=source, derived_from=derived_from)
        if source == "inference":
            self.metadata["inference_count"] += 1
        elif source == "combination":
            self.metadata["combination_count"] += 1
        else:
            self.metadata["user_tokens_count"] += 1
        return True

    def get_tokens(self) -> FrozenSet[Token]:
        """Snapshot immutable dari semua token"""
        return frozenset(self.facts)

    def get_inferred(self) -> List[Tuple[Token, Optional[Token]]]:
        """Token hasil inferensi beserta token asalnya"""
        return [
            (fact.token, fact.derived_from)
            for fact in self.facts.values()
            if fact.source == "inference"
        ]

    def source_of(self, token: Token) -> Optional[str]:
        fact = self.facts.get(token)
        return fact.source if fact else None

    def get_summary(self) -> Dict:
        """Ambil ringkasan working memory untuk debugging/logging"""
        return {
            "tokens": sorted(t.value for t in self.facts),
            "inferred": [t.value for t, _ in self.get_inferred()],
            "metadata": dict(self.metadata),
        }

    def __repr__(self) -> str:
        return f"WorkingMemory(tokens={len(self.facts)}, inferred={self.metadata['inference_count']})"
