# tgi.py
# Total Grind Index: streak days weigh most, then actions, raw minutes least.

ACTION_WEIGHT = 3
STREAK_WEIGHT = 5
MINUTE_WEIGHT = 0.2

# one point per minute of a grind session
GRIND_TGI_PER_MINUTE = 1.0


def raw_tgi(action_count: int, streak_days: int, duration_minutes: float) -> float:
    return (
        action_count * ACTION_WEIGHT
        + streak_days * STREAK_WEIGHT
        + duration_minutes * MINUTE_WEIGHT
    )


def compute_tgi(action_count: int, streak_days: int, duration_minutes: float,
                decay_multiplier: float = 1.0) -> float:
    return raw_tgi(action_count, streak_days, duration_minutes) * decay_multiplier


def session_tgi(elapsed_seconds: float) -> float:
    """TGI earned by a single grind session. Rust never applies here."""
    return (elapsed_seconds / 60) * GRIND_TGI_PER_MINUTE
