"""Settings for the messaging and application gates.

Settings are plain dataclasses, loaded from and saved to a YAML file. They
are passed explicitly into each gate call rather than read from a global.

Example ``settings.yaml``::

    communication_controls:
      mask_phone_email: true
      block_phone_email_sharing: true
      block_external_links: true
      blocked_keywords: [whatsapp, telegram]
    application_gate:
      min_score_for_auto_submit: 70
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

HOME_ENV_VAR = "EDUTRUST_HOME"
SETTINGS_FILE = "settings.yaml"

DEFAULT_BLOCKED_KEYWORDS: tuple[str, ...] = (
    "whatsapp",
    "call me",
    "telegram",
    "dm",
    "number",
    "mobile",
    "contact",
    "phone",
    "email me",
)


def default_home() -> Path:
    """Base directory for EduTrust data (``$EDUTRUST_HOME`` or ``~/.edutrust``)."""
    env = os.environ.get(HOME_ENV_VAR)
    return Path(env) if env else Path.home() / ".edutrust"


@dataclass(frozen=True)
class CommunicationControls:
    """Toggles and keyword list applied at message-send time."""

    mask_phone_email: bool = True
    block_phone_email_sharing: bool = True
    block_external_links: bool = True
    blocked_keywords: tuple[str, ...] = DEFAULT_BLOCKED_KEYWORDS


@dataclass(frozen=True)
class GateConfig:
    """Thresholds for the application gate."""

    min_score_for_auto_submit: int = 70


@dataclass(frozen=True)
class Settings:
    communication: CommunicationControls = field(default_factory=CommunicationControls)
    gate: GateConfig = field(default_factory=GateConfig)


def settings_from_dict(data: dict | None) -> Settings:
    """Build settings from a parsed YAML mapping; missing keys keep their defaults."""
    data = data or {}
    comm = data.get("communication_controls") or {}
    gate = data.get("application_gate") or {}

    defaults = CommunicationControls()
    keywords = comm.get("blocked_keywords")
    communication = CommunicationControls(
        mask_phone_email=bool(comm.get("mask_phone_email", defaults.mask_phone_email)),
        block_phone_email_sharing=bool(
            comm.get("block_phone_email_sharing", defaults.block_phone_email_sharing)
        ),
        block_external_links=bool(comm.get("block_external_links", defaults.block_external_links)),
        blocked_keywords=(
            tuple(str(k) for k in keywords) if keywords is not None else defaults.blocked_keywords
        ),
    )
    gate_config = GateConfig(
        min_score_for_auto_submit=int(
            gate.get("min_score_for_auto_submit", GateConfig.min_score_for_auto_submit)
        ),
    )
    return Settings(communication=communication, gate=gate_config)


def settings_to_dict(settings: Settings) -> dict:
    return {
        "communication_controls": {
            "mask_phone_email": settings.communication.mask_phone_email,
            "block_phone_email_sharing": settings.communication.block_phone_email_sharing,
            "block_external_links": settings.communication.block_external_links,
            "blocked_keywords": list(settings.communication.blocked_keywords),
        },
        "application_gate": {
            "min_score_for_auto_submit": settings.gate.min_score_for_auto_submit,
        },
    }


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file. A missing file yields the defaults."""
    path = Path(path) if path else default_home() / SETTINGS_FILE
    if not path.exists():
        return Settings()
    with open(path) as f:
        data = yaml.safe_load(f)
    return settings_from_dict(data if isinstance(data, dict) else {})


def save_settings(settings: Settings, path: str | Path | None = None) -> Path:
    """Write *settings* to a YAML file and return its path."""
    path = Path(path) if path else default_home() / SETTINGS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(settings_to_dict(settings), f, sort_keys=False)
    return path
