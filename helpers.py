# helpers.py
from datetime import datetime, timedelta

from config import LOCAL_TZ
from storage import load, save, user_record
from decay import rust_multiplier, hours_since, is_rusting
from engine import activity_state

# ---------- time helpers ----------
def now_ms() -> int:
    return int(datetime.now(LOCAL_TZ).timestamp() * 1000)


def local_date(ms: int):
    return datetime.fromtimestamp(ms / 1000, LOCAL_TZ).date()


# ---------- derived stats ----------
def calculate_streak(sessions, now: int) -> int:
    """Consecutive practice days, alive only if the latest is today or yesterday."""
    days = sorted({local_date(s["end_time"]) for s in sessions}, reverse=True)
    if not days:
        return 0

    today = local_date(now)
    if days[0] not in (today, today - timedelta(days=1)):
        return 0

    streak = 1
    for prev, cur in zip(days, days[1:]):
        if (prev - cur).days != 1:
            break
        streak += 1
    return streak


def last_activity_at(record: dict) -> int:
    """Latest session end or sharpen action, 0 if the user never did either."""
    latest_session = max((s["end_time"] for s in record["sessions"]), default=0)
    latest_log = max((l["timestamp"] for l in record["sharpen_logs"]), default=0)
    return max(latest_session, latest_log)


def total_seconds(record: dict, theme_id: str = None) -> int:
    return sum(
        t["total_seconds"] for t in record["themes"]
        if theme_id is None or t["id"] == theme_id
    )


def today_seconds(record: dict, theme_id: str, now: int) -> int:
    today = local_date(now)
    return sum(
        s["duration_seconds"] for s in record["sessions"]
        if local_date(s["end_time"]) == today
        and (theme_id is None or s["theme_id"] == theme_id)
    )


def running_seconds(record: dict, now: int, theme_id: str = None) -> int:
    """Seconds on a stopwatch that is still running (optionally for one theme)."""
    watch = record.get("stopwatch")
    if not watch:
        return 0
    if theme_id is not None and watch["theme_id"] != theme_id:
        return 0
    return max(0, (now - watch["started_at"]) // 1000)


def activity_state_for(record: dict, now: int, theme_id: str = None):
    return activity_state(
        total_active_seconds=total_seconds(record, theme_id) + running_seconds(record, now, theme_id),
        total_actions=len(record["sharpen_logs"]),
        streak_days=calculate_streak(record["sessions"], now),
        last_activity_ms=last_activity_at(record),
    )


def motivation_for_streak(streak: int):
    """(text, highlight) shown under the stopwatch."""
    if streak == 0:
        return "Today is step one. Going from 0 to 1 is the hardest move.", "Start Now"
    if streak <= 3:
        return "You're past the three-day wall. First hurdle cleared!", "Top 60%"
    if streak <= 7:
        return "A full week. That's no accident, that's skill.", "Top 40%"
    if streak <= 21:
        return "The habit is taking root. You're close to unstoppable.", "Top 20%"
    return "Incredible consistency. You're in pro territory now.", "Top 5% player"


# ---------- formatting ----------
def format_rank(num: int) -> str:
    return f"{num:,}"


def format_clock(seconds: int) -> str:
    h, rem = divmod(int(seconds), 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_mmss(seconds: int) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def format_rust(multiplier: float) -> str:
    if multiplier >= 1.0:
        return "🗡️ Blade condition: sharp"
    return f"🟫 Blade is rusting (score ×{multiplier:.2f})"


# ---------- discord helper ----------
async def display_name_for(uid: str, bot, guild=None):
    member = guild.get_member(int(uid)) if guild else None
    if member:
        return member.display_name
    try:
        user = await bot.fetch_user(int(uid))
        return user.display_name
    except Exception:
        return uid[:6]


# ---------- reminder functions ----------
def toggle_user_reminders(user_id: str) -> bool:
    data = load()
    record = user_record(data, user_id)
    record["reminders"] = not record["reminders"]
    save(data)
    return record["reminders"]


def get_rusting_users(now: int):
    """(user_id, multiplier, hours idle) for opted-in users whose blade is rusting."""
    rusting = []
    for uid, raw in load().items():
        record = user_record({uid: raw}, uid)
        if not record["reminders"]:
            continue
        last = last_activity_at(record)
        if is_rusting(last, now):
            rusting.append((uid, rust_multiplier(last, now), hours_since(last, now)))
    return rusting
