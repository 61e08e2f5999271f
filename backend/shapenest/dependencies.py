"""FastAPI dependency injection."""

from __future__ import annotations

from shapenest.config import Settings, settings
from shapenest.engine.config import EditorConfig
from shapenest.engine.editor import EditorSession

_session: EditorSession | None = None


def get_settings() -> Settings:
    return settings


def get_editor() -> EditorSession:
    """Process-wide editing session, created on first use."""
    global _session
    if _session is None:
        _session = EditorSession(EditorConfig.from_settings(settings))
    return _session
