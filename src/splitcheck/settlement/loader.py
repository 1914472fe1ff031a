#!/usr/bin/env python3
"""
Session File Loader

Reads sessions from disk and writes them back. Two layouts are accepted:

- A single session object: {"id": ..., "members": [...], ...}
- A data export bundle: {"version": "1.0.0", "sessions": [...], "settings": {...}}
  (also a bare JSON list of sessions)

Bundle-level settings (currency) fill in for sessions that have none of their own.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..core.json_utils import read_json, write_json
from ..core.models import Session

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"


class SessionLoadError(Exception):
    """Raised when a session file is missing or malformed."""

    pass


def parse_sessions(data: Any) -> list[Session]:
    """
    Convert decoded JSON into Session objects.

    Raises:
        SessionLoadError: If the structure is neither a session, a list of
            sessions, nor an export bundle, or a session has malformed fields
    """
    bundle_settings: dict[str, Any] = {}

    if isinstance(data, list):
        raw_sessions = data
    elif isinstance(data, dict) and "sessions" in data:
        if not data.get("version"):
            raise SessionLoadError("Invalid data format: export bundle has no version")
        if not isinstance(data["sessions"], list):
            raise SessionLoadError("Invalid data format: 'sessions' must be a list")
        raw_sessions = data["sessions"]
        bundle_settings = data.get("settings") or {}
        if not isinstance(bundle_settings, dict):
            raise SessionLoadError("Invalid data format: 'settings' must be an object")
    elif isinstance(data, dict) and "members" in data:
        raw_sessions = [data]
    else:
        raise SessionLoadError("Invalid data format: expected a session or an export bundle")

    sessions = []
    for index, raw in enumerate(raw_sessions):
        if not isinstance(raw, dict):
            raise SessionLoadError(f"Session #{index} is not an object")
        if bundle_settings and not raw.get("settings"):
            raw = {**raw, "settings": {"currency": bundle_settings.get("currency", "VND")}}
        try:
            sessions.append(Session.from_dict(raw))
        except (AttributeError, TypeError, ValueError) as e:
            raise SessionLoadError(f"Session #{index} is malformed: {e}") from e

    return sessions


def load_sessions(path: str | Path) -> list[Session]:
    """
    Load every session in a session file or export bundle.

    Raises:
        SessionLoadError: If the file is missing, not JSON, or malformed
    """
    path = Path(path)
    if not path.exists():
        raise SessionLoadError(f"Session file not found: {path}")

    try:
        data = read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SessionLoadError(f"Session file {path} is not valid JSON: {e}") from e

    sessions = parse_sessions(data)
    logger.info("Loaded %d sessions from %s", len(sessions), path)
    return sessions


def load_session(path: str | Path, session_id: str | None = None) -> Session:
    """
    Load one session from a file.

    Args:
        path: Session file or export bundle
        session_id: Session to pick from a bundle (default: the first one)

    Raises:
        SessionLoadError: If the file holds no sessions or the id is not found
    """
    sessions = load_sessions(path)
    if not sessions:
        raise SessionLoadError(f"No sessions found in {path}")

    if session_id is None:
        return sessions[0]

    for session in sessions:
        if session.id == session_id:
            return session
    raise SessionLoadError(f"Session {session_id!r} not found in {path}")


def save_sessions(path: str | Path, sessions: list[Session], settings: dict[str, Any] | None = None) -> None:
    """Write sessions as an export bundle readable by load_sessions()."""
    bundle = {
        "version": EXPORT_VERSION,
        "exportDate": datetime.now(timezone.utc).isoformat(),
        "sessions": [session.to_dict() for session in sessions],
        "settings": settings or {},
    }
    write_json(path, bundle)
    logger.info("Saved %d sessions to %s", len(sessions), path)
