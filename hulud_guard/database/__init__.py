"""Malicious package database loading for hulud-guard."""

from .loader import DatabaseConfig, MaliciousDatabase, load_database

__all__ = [
    "DatabaseConfig",
    "MaliciousDatabase",
    "load_database",
]
