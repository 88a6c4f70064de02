# services/logging_service.py

"""
Menyediakan layanan logging terpusat untuk aplikasi diagnosis jaringan.

Modul ini mengkonfigurasi logger standar menggunakan library logging
bawaan Python dan menyediakan LoggingService untuk:
- Log setiap diagnosis (gejala, engine, penyebab teratas)
- Track statistik pemakaian rule dan cause (in-memory)
- Generate system statistics

Penggunaan RotatingFileHandler memastikan file log tidak membengkak
tanpa batas.
"""

import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional, Sequence

from ..core.fuzzy_engine import FUZZY_RULES
from ..core.models import Cause, DiagnosisResult, Symptom, SystemType
from ..core.rule_engine import RULES

LOG_DIR = "logs"
LOG_FILE = os.path.join(LOG_DIR, "diagnosis_history.log")
LOGGER_NAME = "NetDiagLogger"


def setup_logger(
    name: str = LOGGER_NAME,
    log_file: str = LOG_FILE,
    level: int = logging.INFO,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Mengkonfigurasi dan mengembalikan instance logger.

    Mencegah penambahan handler duplikat jika fungsi ini dipanggil
    beberapa kali dengan nama yang sama.

    Args:
        name (str): Nama logger.
        log_file (str): Path ke file log.
        level (int): Level logging (misalnya, logging.INFO, logging.DEBUG).
        max_bytes (int): Ukuran maksimum satu file log sebelum dirotasi.
        backup_count (int): Jumlah file backup yang disimpan.

    Returns:
        logging.Logger: Instance logger yang sudah dikonfigurasi.
    """
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(name)

    # Cek handler milik logger ini saja (bukan ancestor) agar tidak dobel
    if logger.handlers:
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class LoggingService:
    """Service untuk logging dan statistics.

    Menyediakan fungsi untuk:
    - Log diagnosis sessions
    - Track rule & cause usage (in-memory statistics)
    - Generate statistics
    """

    def __init__(self, logger_name: str = LOGGER_NAME, log_config: Optional[Dict[str, Any]] = None):
        """Initialize LoggingService.

        Args:
            logger_name: Nama logger yang akan digunakan
            log_config: Section `logging` dari config YAML (optional)
        """
        log_config = log_config or {}
        self.log_file = os.path.join(
            log_config.get("dir", LOG_DIR),
            log_config.get("file", os.path.basename(LOG_FILE)),
        )
        level = logging.getLevelName(str(log_config.get("level", "INFO")).upper())
        self.logger = setup_logger(
            logger_name,
            self.log_file,
            level if isinstance(level, int) else logging.INFO,
            int(log_config.get("max_bytes", 5 * 1024 * 1024)),
            int(log_config.get("backup_count", 5)),
        )
        # Logger yang sudah dikonfigurasi tetap menulis ke file lamanya
        for handler in self.logger.handlers:
            if isinstance(handler, RotatingFileHandler):
                self.log_file = handler.baseFilename
                break
        self._rule_usage: Dict[int, int] = {}
        self._cause_usage: Dict[str, int] = {}
        self._system_usage: Dict[str, int] = {}
        self._diagnosis_count = 0

    def log_diagnosis(
        self,
        symptoms: Sequence[Symptom],
        system_type: SystemType,
        result: DiagnosisResult,
    ) -> None:
        """Log diagnosis session dan update usage statistics.

        Args:
            symptoms: Gejala yang dilaporkan
            system_type: Engine yang dipakai
            result: Hasil diagnosis dari orchestrator
        """
        top = result.top_cause if result.has_evidence else None
        top_label = top.cause if top else "None"
        certainty = f"{result.certainty:.1f}" if result.certainty is not None else "-"

        self.logger.info(
            f"Diagnosis [{system_type.value}]: {len(symptoms)} symptoms → "
            f"{top_label} (certainty: {certainty})"
        )

        self._diagnosis_count += 1
        self._system_usage[system_type.value] = self._system_usage.get(system_type.value, 0) + 1
        if top:
            self._cause_usage[top_label] = self._cause_usage.get(top_label, 0) + 1

        if result.applied_rules:
            self.logger.info(
                "Applied rules: " + ", ".join(f"R{r.rule_id}" for r in result.applied_rules)
            )
            for applied in result.applied_rules:
                self._rule_usage[applied.rule_id] = self._rule_usage.get(applied.rule_id, 0) + 1

    def log_error(self, error_msg: str, exception: Optional[Exception] = None) -> None:
        """Log error message (dengan traceback jika ada exception)."""
        if exception:
            self.logger.error(f"{error_msg}: {str(exception)}", exc_info=exception)
        else:
            self.logger.error(error_msg)

    def log_info(self, message: str) -> None:
        self.logger.info(message)

    def log_warning(self, message: str) -> None:
        self.logger.warning(message)

    def get_statistics(self) -> Dict[str, Any]:
        """Dapatkan statistik penggunaan sistem."""
        top_causes = sorted(
            [{"cause": c, "count": n} for c, n in self._cause_usage.items()],
            key=lambda x: x["count"],
            reverse=True,
        )
        log_exists = os.path.exists(self.log_file)
        return {
            "total_rules": len(RULES),
            "total_fuzzy_rules": len(FUZZY_RULES),
            "total_symptoms": len(Symptom),
            "total_causes": len(Cause),
            "total_diagnoses": self._diagnosis_count,
            "system_usage": dict(self._system_usage),
            "top_causes": top_causes,
            "most_used_rules": self.get_most_used_rules(top_n=10),
            "log_file": self.log_file,
            "log_file_exists": log_exists,
            "log_file_size": os.path.getsize(self.log_file) if log_exists else 0,
            "timestamp": datetime.now().isoformat(),
        }

    def get_most_used_rules(self, top_n: int = 5) -> List[Dict[str, Any]]:
        """Dapatkan rules yang paling sering digunakan, lengkap dengan detailnya."""
        rules = {rule.id: rule for rule in RULES}
        sorted_usage = sorted(
            self._rule_usage.items(),
            key=lambda x: (-x[1], x[0]),
        )[:top_n]

        enriched = []
        for rule_id, count in sorted_usage:
            rule = rules.get(rule_id)
            enriched.append({
                "rule_id": f"R{rule_id}",
                "usage_count": count,
                "cause": rule.cause.label if rule else "Unknown",
                "priority": rule.priority if rule else None,
                "conditions_count": len(rule.conditions) if rule else 0,
            })
        return enriched

    def clear_statistics(self) -> None:
        """Reset semua statistik in-memory."""
        self._rule_usage = {}
        self._cause_usage = {}
        self._system_usage = {}
        self._diagnosis_count = 0
        self.logger.warning("Usage statistics cleared!")
