# File: netdiag/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple


class Symptom(Enum):
    """Gejala jaringan yang bisa diamati user (label kanonik)."""
    NO_INTERNET = "No internet"
    PACKET_LOSS = "Packet loss"
    DNS_ERROR = "DNS error"
    SLOW_PAGE_LOAD = "Slow page load"
    WEAK_WIFI = "Weak Wi-Fi signal"
    INTERMITTENT = "Intermittent connection"
    SLOW_INTERNAL_SERVER = "Slow internal server"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> Optional["Symptom"]:
        """Cari Symptom dari label UI. None jika label tidak dikenal."""
        if not isinstance(label, str):
            return None
        wanted = " ".join(label.split()).lower()
        for symptom in cls:
            if symptom.value.lower() == wanted or symptom.name.lower() == wanted:
                return symptom
        return None


class Cause(Enum):
    """Akar masalah jaringan (label kanonik)."""
    ROUTER_FAILURE = "Router failure"
    ISP_PROBLEMS = "ISP problems"
    DEFECTIVE_HARDWARE = "Defective network hardware"
    BAD_DNS_CONFIG = "Bad DNS configuration"
    WIFI_INTERFERENCE = "Wi-Fi interference"
    SERVER_OVERLOAD = "Internal server overload"
    MALWARE = "Malware on devices"
    NETWORK_CONGESTION = "Network congestion"
    INFRASTRUCTURE_FAILURE = "Core infrastructure failure"

    @property
    def label(self) -> str:
        return self.value


class Token(Enum):
    """Token simbolik internal untuk rule-based engine."""
    NO_INTERNET = "no-internet"
    PING_FAILS = "ping-fails"
    PING_OK = "ping-ok"
    PACKET_LOSS = "packet-loss"
    DNS_ERROR = "dns-error"
    PAGES_DONT_LOAD = "pages-dont-load"
    WEAK_WIFI = "weak-wifi"
    INTERMITTENT = "intermittent"
    SLOW_SERVER = "slow-server"
    WIFI = "wifi"
    CABLE = "cable"
    DAMAGED_CABLE = "damaged-cable"
    SLOW_UPLOAD = "slow-upload"
    MULTIPLE_USERS_AFFECTED = "multiple-users-affected"
    ISP_MAINTENANCE = "isp-maintenance"
    PROBLEMS_PERSIST = "problems-persist"
    BAD_DNS_CONFIG = "bad-dns-config"
    HIGH_RESOURCE_USAGE = "high-resource-usage"

    @property
    def description(self) -> str:
        return TOKEN_DESCRIPTIONS[self]


TOKEN_DESCRIPTIONS: Dict[Token, str] = {
    Token.NO_INTERNET: "No Internet connection",
    Token.PING_FAILS: "Ping fails",
    Token.PING_OK: "Ping succeeds",
    Token.PACKET_LOSS: "Packet loss on ping",
    Token.DNS_ERROR: "DNS resolution errors",
    Token.PAGES_DONT_LOAD: "Pages do not load",
    Token.WEAK_WIFI: "Weak Wi-Fi signal",
    Token.INTERMITTENT: "Intermittent connection",
    Token.SLOW_SERVER: "Slow internal server",
    Token.WIFI: "Connected over Wi-Fi",
    Token.CABLE: "Connected over cable",
    Token.DAMAGED_CABLE: "Damaged cable",
    Token.SLOW_UPLOAD: "Slow file uploads",
    Token.MULTIPLE_USERS_AFFECTED: "Multiple users affected",
    Token.ISP_MAINTENANCE: "ISP maintenance announced",
    Token.PROBLEMS_PERSIST: "Problems persist",
    Token.BAD_DNS_CONFIG: "DNS configuration suspected",
    Token.HIGH_RESOURCE_USAGE: "High resource usage",
}


class SystemType(Enum):
    """Jenis inference engine yang bisa dipilih caller."""
    FREQUENCY = "bayesian"
    FUZZY = "fuzzy"
    RULE_BASED = "rule-based"

    @classmethod
    def parse(cls, value: Any) -> "SystemType":
        if isinstance(value, cls):
            return value
        for system_type in cls:
            if system_type.value == value:
                return system_type
        raise ValueError(f"Unknown system type: {value!r}")


@dataclass(frozen=True)
class Rule:
    """Satu aturan IF-THEN: semua token kondisi -> satu Cause."""
    id: int
    conditions: FrozenSet[Token]
    cause: Cause
    priority: int


# Rentang valid tiap dimensi FuzzyInput: (min, max)
FUZZY_RANGES: Dict[str, Tuple[float, float]] = {
    "connectivity": (0.0, 100.0),
    "throughput": (0.0, 100.0),
    "packet_loss": (0.0, 100.0),
    "dns_errors": (0.0, 10.0),
    "wifi_signal": (0.0, 100.0),
    "page_load": (0.0, 5000.0),
    "server_latency": (0.0, 5000.0),
}


@dataclass(frozen=True)
class FuzzyInput:
    """Tujuh pengukuran kontinu untuk fuzzy engine.

    Default-nya adalah jaringan sehat (baseline), sehingga caller cukup
    mengisi dimensi yang bermasalah.
    """
    connectivity: float = 100.0   # %
    throughput: float = 80.0      # Mbps
    packet_loss: float = 0.0      # %
    dns_errors: float = 0.0       # per jam
    wifi_signal: float = 90.0     # %
    page_load: float = 400.0      # ms
    server_latency: float = 30.0  # ms

    def clamped(self) -> "FuzzyInput":
        """Salinan dengan setiap nilai dipotong ke rentang validnya."""
        values = {}
        for f in fields(self):
            low, high = FUZZY_RANGES[f.name]
            values[f.name] = min(high, max(low, float(getattr(self, f.name))))
        return replace(self, **values)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: float(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FuzzyInput":
        """Bangun FuzzyInput dari mapping. Key yang hilang memakai baseline."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown measurement(s): {', '.join(sorted(unknown))}")
        return cls(**{k: float(v) for k, v in data.items()})


MembershipProfile = Dict[str, Dict[str, float]]


@dataclass(frozen=True)
class CauseResult:
    """Satu baris hasil diagnosis: penyebab, aksi, dan (opsional) probabilitas."""
    cause: str
    actions: Tuple[str, ...]
    probability: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {"causa": self.cause, "acciones": list(self.actions)}
        if self.probability is not None:
            row["probabilidad"] = self.probability
        return row


@dataclass
class DiagnosisResult:
    """Hasil akhir satu kali diagnosis, milik caller sepenuhnya."""
    system_type: SystemType
    causes: List[CauseResult] = field(default_factory=list)
    certainty: Optional[float] = None
    applied_rules: List[Any] = field(default_factory=list)  # List[AppliedRule]
    memberships: Optional[MembershipProfile] = None

    @property
    def top_cause(self) -> Optional[CauseResult]:
        return self.causes[0] if self.causes else None

    @property
    def has_evidence(self) -> bool:
        """False jika tidak ada penyebab, atau semua penyebab bernilai 0%."""
        return any(c.probability != 0 for c in self.causes)

    def cause_labels(self) -> List[str]:
        return [c.cause for c in self.causes]

    def to_dict(self) -> Dict[str, Any]:
        """Format JSON untuk boundary (field names mengikuti kontrak API)."""
        body: Dict[str, Any] = {
            "sistema": self.system_type.value,
            "causas": [c.to_dict() for c in self.causes],
        }
        if self.certainty is not None:
            body["certeza"] = round(self.certainty, 1)
        if self.applied_rules:
            body["reglasAplicadas"] = [r.to_row() for r in self.applied_rules]
        if self.memberships is not None:
            body["pertenencias"] = self.memberships
        return body
