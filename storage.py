# storage.py
import json
import logging
import uuid

from config import DATA_DIR

log = logging.getLogger(__name__)

DATA_FILE = DATA_DIR / "progress.json"


def load():
    if DATA_FILE.exists():
        try:
            return json.loads(DATA_FILE.read_text())
        except json.JSONDecodeError:
            aside = DATA_FILE.with_name(DATA_FILE.name + ".corrupt")
            DATA_FILE.replace(aside)
            log.warning("Could not parse %s, moved it to %s and starting empty", DATA_FILE, aside)
    return {}          # {user_id: {profile, themes, sessions, sharpen_logs, ...}}


def save(data: dict):
    DATA_FILE.parent.mkdir(parents=True, exist_ok=True)
    DATA_FILE.write_text(json.dumps(data, indent=2, ensure_ascii=False))


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def user_record(data: dict, uid: str) -> dict:
    """Get (creating if needed) one user's record inside `data`."""
    record = data.setdefault(uid, {})
    record.setdefault("profile", {})
    record.setdefault("themes", [])
    record.setdefault("sessions", [])        # newest first
    record.setdefault("sharpen_logs", [])    # newest first
    record.setdefault("slash_logs", [])      # newest first
    record.setdefault("stopwatch", None)
    record.setdefault("grind", None)
    record.setdefault("reminders", False)
    return record


def find_theme(record: dict, name_or_id: str):
    key = name_or_id.strip().lower()
    return next(
        (t for t in record["themes"] if t["id"] == name_or_id or t["title"].lower() == key),
        None,
    )


def add_theme(record: dict, title: str, icon: str, now_ms: int) -> dict:
    theme = {
        "id": new_id(),
        "title": title,
        "icon": icon,
        "total_seconds": 0,
        "created_at": now_ms,
    }
    record["themes"].append(theme)
    return theme


def add_session(record: dict, theme: dict, start_ms: int, end_ms: int, note: str = "") -> dict:
    """Record a finished practice session and roll it into the theme total."""
    duration = max(0, (end_ms - start_ms) // 1000)
    session = {
        "id": new_id(),
        "theme_id": theme["id"],
        "start_time": start_ms,
        "end_time": end_ms,
        "duration_seconds": duration,
        "note": note,
    }
    sessions = record["sessions"]
    # keep newest first even for back-dated sessions
    idx = next((i for i, s in enumerate(sessions) if s["end_time"] <= end_ms), len(sessions))
    sessions.insert(idx, session)
    theme["total_seconds"] += duration
    return session


def add_sharpen_log(record: dict, action: str, now_ms: int) -> dict:
    entry = {"id": new_id(), "action": action, "timestamp": now_ms}
    record["sharpen_logs"].insert(0, entry)
    return entry


def add_slash_log(record: dict, result, now_ms: int) -> dict:
    entry = {
        "id": new_id(),
        "duration_sec": result.duration_sec,
        "earned_tgi": result.earned_tgi,
        "executed_at": now_ms,
        "rank_before": result.rank_before,
        "rank_after": result.rank_after,
        "overtaken_count": result.overtaken_count,
    }
    record["slash_logs"].insert(0, entry)
    return entry
