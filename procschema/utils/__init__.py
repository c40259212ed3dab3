"""Utility modules for procschema."""

from .type_classifier import TypeClassifier
from .db_config import DatabaseConfig

__all__ = ["TypeClassifier", "DatabaseConfig"]
