"""
Tracker configuration.

Defines the settings for the request database, the intake extraction
service, department contacts used in notices, and alert thresholds.
Supports loading from a JSON config file with secrets and URLs sourced from
environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from foia_deadlines.engine.record import Department

logger = logging.getLogger(__name__)

DEFAULT_DB_URL = "sqlite:///foia_deadlines.db"

ENV_DB_URL = "FOIA_DEADLINES_DB_URL"
ENV_INTAKE_URL = "FOIA_DEADLINES_INTAKE_URL"
ENV_INTAKE_TOKEN = "FOIA_DEADLINES_INTAKE_TOKEN"


@dataclass
class IntakeSettings:
    """Connection details for the document extraction service.

    Attributes:
        base_url: Root URL of the extraction service API.
        api_token: Bearer token (loaded from env var at runtime).
        timeout: Request timeout in seconds.
    """

    base_url: str = ""
    api_token: str = ""
    timeout: float = 60.0

    @property
    def configured(self) -> bool:
        return bool(self.base_url)


@dataclass
class NoticeSettings:
    """Sender details and department contacts for collaboration notices.

    Attributes:
        sender_name: Person who assigns requests to departments.
        sender_title: Their position, quoted in the assignment notice.
        department_emails: Contact address per department.
    """

    sender_name: str = "Transparency Officer"
    sender_title: str = "Head of Communications, Transparency and Citizen Participation"
    department_emails: dict[Department, str] = field(default_factory=dict)

    def email_for(self, department: Optional[Department]) -> Optional[str]:
        if department is None:
            return None
        return self.department_emails.get(department)


@dataclass
class AlertSettings:
    """Business days before a deadline at which each alert level fires."""

    info_days: int = 5
    warning_days: int = 3
    urgent_days: int = 1


@dataclass
class TrackerSettings:
    """Global tracker configuration."""

    db_url: str = DEFAULT_DB_URL
    intake: IntakeSettings = field(default_factory=IntakeSettings)
    notices: NoticeSettings = field(default_factory=NoticeSettings)
    alerts: AlertSettings = field(default_factory=AlertSettings)


def load_settings(config_path: Optional[str | Path] = None) -> TrackerSettings:
    """Load TrackerSettings from a JSON file and the environment.

    Without a path, defaults plus environment variables are used. The JSON
    file may name the env var holding the intake token in
    ``intake.token_env``; ``FOIA_DEADLINES_DB_URL`` and
    ``FOIA_DEADLINES_INTAKE_URL`` override the file when set.

    Args:
        config_path: Path to the tracker config JSON file.

    Returns:
        A fully populated TrackerSettings instance.

    Raises:
        FileNotFoundError: If config_path is given and does not exist.
        json.JSONDecodeError: If the JSON is malformed.
        ValueError: If a department key is not a known department.
    """
    raw: dict[str, Any] = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Tracker config not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        logger.info("Loaded tracker config from %s", path)

    # --- Intake service ---
    intake_raw = raw.get("intake", {})
    token_env = intake_raw.get("token_env", ENV_INTAKE_TOKEN)
    intake = IntakeSettings(
        base_url=os.environ.get(ENV_INTAKE_URL, intake_raw.get("base_url", "")),
        api_token=os.environ.get(token_env, "") if token_env else "",
        timeout=float(intake_raw.get("timeout", 60.0)),
    )

    # --- Notices ---
    notices_raw = raw.get("notices", {})
    notices = NoticeSettings(
        department_emails={
            Department(key): email
            for key, email in notices_raw.get("department_emails", {}).items()
        },
    )
    if "sender_name" in notices_raw:
        notices.sender_name = notices_raw["sender_name"]
    if "sender_title" in notices_raw:
        notices.sender_title = notices_raw["sender_title"]

    # --- Alerts ---
    alerts_raw = raw.get("alerts", {})
    alerts = AlertSettings(
        info_days=alerts_raw.get("info_days", 5),
        warning_days=alerts_raw.get("warning_days", 3),
        urgent_days=alerts_raw.get("urgent_days", 1),
    )

    return TrackerSettings(
        db_url=os.environ.get(ENV_DB_URL, raw.get("db_url", DEFAULT_DB_URL)),
        intake=intake,
        notices=notices,
        alerts=alerts,
    )
