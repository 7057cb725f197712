"""Compact date labels for commit and repository listings."""

from __future__ import annotations

from datetime import datetime, timezone


def format_smart_date(value: str | datetime | None, now: datetime | None = None) -> str:
    """Render *value* as ``"Mar 5"`` within the current year, else ``"05/03/24"``.

    ISO-8601 strings (including a trailing ``Z``) are accepted.  Returns an
    empty string when *value* is missing or unparseable.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    if value.year == now.year:
        return f"{value:%b} {value.day}"
    return f"{value:%d/%m/%y}"
