"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streamscout",
    "environment": "dev",
    "provider": {
        "id": "a111477",
        "name": "A111477",
        "base_url": "https://a.111477.xyz",
        "enabled": True,
        "json_probe": "none",
    },
    "http": {
        "timeout_seconds": 15.0,
        "max_redirects": 5,
    },
    "cache": {
        "backend": "memory",
        "ttl_seconds": 300,
        "check_period_seconds": 120,
        "dir": "./.cache/streamscout",
        "max_concurrent": 10,
    },
    "logging": {
        "level": "WARNING",
        "format": None,  # Derived from environment in schema.py
        "debug": False,
    },
}
