"""
Client configuration.

Settings come from a YAML (or JSON) file, then environment variables
override individual keys:

    VMAPI_CONFIG   path of the settings file
    VMAPI_URL      base URL of the VM API
    WFAPI_URL      base URL of the workflow API
    VMAPI_TIMEOUT  request timeout in seconds
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_VMAPI_URL = "http://localhost:8080"

_ENV_KEYS = {
    "VMAPI_URL": "vmapi_url",
    "WFAPI_URL": "wfapi_url",
    "VMAPI_TIMEOUT": "timeout",
}


class ClientSettings(BaseModel):
    """Where and how to reach the fleet APIs.

    ``wfapi_url`` points at the workflow API. Nothing here talks to it yet;
    it is loaded so one settings file can serve a future job client too.
    """

    vmapi_url: str = Field(default=DEFAULT_VMAPI_URL, min_length=1)
    wfapi_url: str | None = None
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")


def load_settings(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> ClientSettings:
    """Read settings from ``path`` (or $VMAPI_CONFIG) and apply env overrides."""
    env = os.environ if environ is None else environ
    if path is None:
        path = env.get("VMAPI_CONFIG")
    payload: dict[str, Any] = {}
    if path:
        payload.update(_load_text_payload(Path(path).read_text()))
    for env_key, field_name in _ENV_KEYS.items():
        if env.get(env_key):
            payload[field_name] = env[env_key]
    try:
        return ClientSettings.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid vmapi settings: {exc}") from exc


def _load_text_payload(raw: str | bytes) -> dict[str, Any]:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError:
        loaded = json.loads(text)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError("vmapi settings must be a mapping")
    return loaded


__all__ = ["ClientSettings", "DEFAULT_VMAPI_URL", "load_settings"]
