"""Sistem pakar diagnosis masalah jaringan (frequency, fuzzy, rule-based)."""

__version__ = "1.0.0"
