# decay.py
# "Rust": standing score loses value after a day without practice.

MS_PER_HOUR = 60 * 60 * 1000

GRACE_HOURS = 24
FLOOR_HOURS = 72
DAILY_PENALTY = 0.05
FLOOR = 0.8


def hours_since(last_activity_ms: int, now_ms: int) -> float:
    return (now_ms - last_activity_ms) / MS_PER_HOUR


def rust_multiplier(last_activity_ms: int, now_ms: int) -> float:
    """
    Multiplier in [0.8, 1.0] applied to the standing TGI.

    No activity yet means no penalty. Inside the 24h grace window the
    blade is clean; after that each started day costs 0.05, never going
    below 0.8.
    """
    if not last_activity_ms:
        return 1.0

    hours = hours_since(last_activity_ms, now_ms)
    if hours < GRACE_HOURS:
        return 1.0
    if hours < FLOOR_HOURS:
        days_over = int((hours - GRACE_HOURS) // 24) + 1
        return max(FLOOR, 1.0 - days_over * DAILY_PENALTY)
    return FLOOR


def rust_level(last_activity_ms: int, now_ms: int) -> float:
    """Visual rust intensity, 0 (clean) to 1 (fully rusted)."""
    if not last_activity_ms:
        return 0.0
    hours = hours_since(last_activity_ms, now_ms)
    if hours <= GRACE_HOURS:
        return 0.0
    return min(1.0, (hours - GRACE_HOURS) / (FLOOR_HOURS - GRACE_HOURS))


def is_rusting(last_activity_ms: int, now_ms: int) -> bool:
    return rust_multiplier(last_activity_ms, now_ms) < 1.0
