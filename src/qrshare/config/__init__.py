"""Configuration management for qrshare.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides with the ``QRSHARE_`` prefix.
"""

from qrshare.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
