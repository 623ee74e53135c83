# ranks.py
# Practice levels by accumulated hours on the way to 10,000.
import math

RANKS = [
    {"level": 1, "name": "Beginner",     "hours": 0,    "emoji": "🌱"},
    {"level": 2, "name": "Amateur",      "hours": 100,  "emoji": "🔰"},
    {"level": 3, "name": "Intermediate", "hours": 500,  "emoji": "⚔️"},
    {"level": 4, "name": "Advanced",     "hours": 1000, "emoji": "🛡️"},
    {"level": 5, "name": "Expert",       "hours": 2500, "emoji": "🏅"},
    {"level": 6, "name": "Master",       "hours": 5000, "emoji": "👑"},
    {"level": 7, "name": "Legend",       "hours": 7500, "emoji": "🐉"},
]


def threshold(rank: dict) -> int:
    return rank["hours"] * 3600


def level_for(seconds: int) -> dict:
    current = RANKS[0]
    for rank in RANKS:
        if seconds >= threshold(rank):
            current = rank
    return current


def level_progress(seconds: int) -> dict:
    """Where `seconds` sits between the current level and the next two."""
    current = level_for(seconds)
    idx = RANKS.index(current)
    nxt = RANKS[idx + 1] if idx + 1 < len(RANKS) else None
    after = RANKS[idx + 2] if idx + 2 < len(RANKS) else None

    start = threshold(current)
    # past Legend the next mark is a virtual one at double the threshold
    end = threshold(nxt) if nxt else threshold(current) * 2
    pct = min(100.0, max(0.0, (seconds - start) / (end - start) * 100))

    return {
        "current": current,
        "next": nxt,
        "percent": pct,
        "hours_to_next": max(0, math.ceil((end - seconds) / 3600)),
        "hours_to_after": math.ceil((threshold(after) - seconds) / 3600) if after else None,
    }
