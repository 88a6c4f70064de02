# services/config.py

"""
Loader konfigurasi YAML.

File default: configs/app.yaml (bisa diganti lewat env NETDIAG_CONFIG).
Key yang tidak ada di file diisi dari DEFAULT_CONFIG (deep merge), sehingga
file parsial tetap valid.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

CONFIG_ENV = "NETDIAG_CONFIG"
CONFIG_PATH = Path("configs/app.yaml")

DEFAULT_CONFIG: Dict[str, Any] = {
    "app": {"name": "Network Problem Diagnosis", "theme": "dark"},
    "diagnosis": {
        "default_system": "bayesian",
        "rank_probability": {"start": 90, "step": 15, "floor": 20},
        "fuzzy_dns": {"threshold": 5.0, "probability": 85},
    },
    "logging": {
        "dir": "logs",
        "file": "diagnosis_history.log",
        "level": "INFO",
        "max_bytes": 5 * 1024 * 1024,
        "backup_count": 5,
    },
    "ui": {"show_explanation": True, "max_symptoms_selectable": 7},
    "reports": {"output_dir": "reports"},
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Gabungkan `override` ke salinan `base` secara rekursif."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV)
    return Path(env_path) if env_path else CONFIG_PATH


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load config YAML dengan fallback ke default.

    Raises:
        ValueError: jika isi file bukan mapping YAML.
    """
    config_path = resolve_config_path(path)
    if not config_path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config {config_path} must contain a YAML mapping")

    return deep_merge(DEFAULT_CONFIG, data)
