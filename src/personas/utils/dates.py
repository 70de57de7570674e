from datetime import datetime, timezone
from typing import Optional


def utc_now_iso() -> str:
    """current time as an ISO-8601 UTC string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_relative(iso: str, now: Optional[datetime] = None) -> str:
    """
    human readable age of an ISO timestamp.

    returns "just now", "5m ago", "3h ago", "12d ago", or the local date
    for anything older than 30 days. unparseable input is returned as is.
    """
    try:
        then = parse_iso(iso)
    except ValueError:
        return iso

    now = now or datetime.now(timezone.utc)
    seconds = (now - then).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 30:
        return f"{days}d ago"
    return then.astimezone().date().isoformat()
