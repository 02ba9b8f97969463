"""Configuration schema and loading for nativedeps."""

from .loader import load_config, read_document
from .schema import NativeDepsConfig

__all__ = ["NativeDepsConfig", "load_config", "read_document"]
