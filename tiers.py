# tiers.py
# TGI tiers: minimum TGI -> estimated world rank. Ascending TGI, descending rank.

TIERS = [
    {"name": "Blunt",   "percentile": 100,    "min_tgi": 0,      "rank": 8_232_000_000},
    {"name": "Sharp",   "percentile": 40,     "min_tgi": 100,    "rank": 3_200_000_000},
    {"name": "Master",  "percentile": 10,     "min_tgi": 1000,   "rank": 820_000_000},
    {"name": "Supreme", "percentile": 1,      "min_tgi": 3000,   "rank": 82_000_000},
    {"name": "Divine",  "percentile": 0.0001, "min_tgi": 10000,  "rank": 8_000},
]


def validate_tiers(tiers):
    """Fail loudly on a table that would break rank interpolation."""
    assert tiers, "tier table is empty"
    assert tiers[0]["min_tgi"] >= 0, "first tier must start at a non-negative TGI"
    for lower, upper in zip(tiers, tiers[1:]):
        assert lower["min_tgi"] < upper["min_tgi"], (
            f"tier {upper['name']} must need more TGI than {lower['name']}"
        )
        assert lower["rank"] > upper["rank"], (
            f"tier {upper['name']} must rank better than {lower['name']}"
        )
    assert tiers[-1]["rank"] >= 1
    return tiers


validate_tiers(TIERS)


def current_tier(tgi: float, tiers=TIERS) -> dict:
    """Highest tier already reached, or the first one."""
    for tier in reversed(tiers):
        if tgi >= tier["min_tgi"]:
            return tier
    return tiers[0]


def next_tier(tgi: float, tiers=TIERS):
    for tier in tiers:
        if tgi < tier["min_tgi"]:
            return tier
    return None
