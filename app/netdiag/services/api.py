# services/api.py

"""
Request boundary untuk diagnosis.

Semua validasi payload terjadi di sini; engine hanya menerima input yang
sudah bertipe benar. Format request:

    {"sintomas": ["No internet", ...], "systemType": "fuzzy",
     "mediciones": {"dns_errors": 7}}

`symptoms` diterima sebagai alias `sintomas`. Response memakai
DiagnosisResult.to_dict().
"""

import math
from dataclasses import dataclass, field, replace
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..core.fuzzy_engine import symptoms_to_input
from ..core.models import DiagnosisResult, FuzzyInput, Symptom, SystemType
from ..core.orchestrator import DiagnosisInput, DiagnosisOrchestrator, OrchestratorSettings
from .logging_service import LoggingService


class RequestValidationError(ValueError):
    """Payload request tidak valid (dipetakan ke HTTP 400)."""


@dataclass
class DiagnosisRequest:
    symptoms: List[Symptom]
    system_type: SystemType
    measurements: Optional[Dict[str, float]] = None
    unknown_labels: List[str] = field(default_factory=list)


def _is_number(value: Any) -> bool:
    """Angka real yang berhingga (bool, NaN dan inf ditolak)."""
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def parse_request(
    payload: Any,
    default_system: SystemType = SystemType.FREQUENCY,
) -> DiagnosisRequest:
    """
    Validasi payload dan ubah ke DiagnosisRequest.

    Raises:
        RequestValidationError: jika bentuk payload tidak valid.
    """
    if not isinstance(payload, Mapping):
        raise RequestValidationError("Request body must be a JSON object")

    raw_symptoms = payload.get("sintomas", payload.get("symptoms"))
    if raw_symptoms is None:
        raise RequestValidationError("Symptoms are required")
    if not isinstance(raw_symptoms, (list, tuple)):
        raise RequestValidationError("Symptoms must be a list")

    symptoms: List[Symptom] = []
    unknown: List[str] = []
    for label in raw_symptoms:
        if not isinstance(label, str):
            raise RequestValidationError("Every symptom must be a string")
        symptom = Symptom.from_label(label)
        if symptom is None:
            unknown.append(label)
        else:
            symptoms.append(symptom)

    raw_system = payload.get("systemType")
    if raw_system is None:
        system_type = default_system
    else:
        try:
            system_type = SystemType.parse(raw_system)
        except ValueError:
            valid = ", ".join(s.value for s in SystemType)
            raise RequestValidationError(f"Invalid system type: {raw_system!r} (expected one of {valid})")

    measurements = None
    raw_measurements = payload.get("mediciones")
    if raw_measurements is not None:
        if not isinstance(raw_measurements, Mapping):
            raise RequestValidationError("Measurements must be an object")
        bad = [k for k, v in raw_measurements.items() if not _is_number(v)]
        if bad:
            raise RequestValidationError(f"Measurements must be finite numbers: {', '.join(map(str, bad))}")
        try:
            FuzzyInput.from_dict(raw_measurements)
        except ValueError as e:
            raise RequestValidationError(str(e))
        measurements = {k: float(v) for k, v in raw_measurements.items()}

    return DiagnosisRequest(
        symptoms=symptoms,
        system_type=system_type,
        measurements=measurements,
        unknown_labels=unknown,
    )


class DiagnosisService:
    """Penghubung antara caller (UI / HTTP) dan DiagnosisOrchestrator."""

    def __init__(
        self,
        orchestrator: Optional[DiagnosisOrchestrator] = None,
        logging_service: Optional[LoggingService] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        config = config or {}
        self.orchestrator = orchestrator or DiagnosisOrchestrator(OrchestratorSettings.from_config(config))
        self.logging_service = logging_service or LoggingService(log_config=config.get("logging"))

    def build_input(self, request: DiagnosisRequest) -> DiagnosisInput:
        """Pengukuran eksplisit menimpa bacaan hasil konversi gejala (fuzzy saja)."""
        if request.system_type is SystemType.FUZZY and request.measurements:
            base = symptoms_to_input(request.symptoms) if request.symptoms else FuzzyInput()
            return replace(base, **request.measurements)
        return request.symptoms

    def run(self, request: DiagnosisRequest) -> DiagnosisResult:
        if request.unknown_labels:
            self.logging_service.log_warning(
                f"Ignoring unknown symptom(s): {', '.join(request.unknown_labels)}"
            )
        result = self.orchestrator.diagnose(self.build_input(request), request.system_type)
        self.logging_service.log_diagnosis(request.symptoms, request.system_type, result)
        return result

    def handle(self, payload: Any) -> Tuple[int, Dict[str, Any]]:
        """Proses satu request. Returns (status_code, body)."""
        try:
            request = parse_request(payload, self.orchestrator.settings.default_system)
        except RequestValidationError as e:
            self.logging_service.log_warning(f"Rejected request: {e}")
            return 400, {"error": str(e)}

        try:
            result = self.run(request)
        except Exception as e:
            self.logging_service.log_error("Error processing diagnosis", e)
            return 500, {"error": "Error processing diagnosis"}

        return 200, result.to_dict()
