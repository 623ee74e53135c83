# phases.py
# Hours-based global ranking: four phases, each its own curve.
import math

from schema import PhaseReading

P1_LIMIT = 20
P2_LIMIT = 100
P3_LIMIT = 1000

MIN_PERCENTILE = 0.00001
MAX_PERCENTILE = 100.0

# people overtaken per second once the curve flattens out
MASTERY_SPEED = 100

PHASES = {
    "P1": {
        "title": "Onboarding",
        "velocity": "Low",
        "message": "Aim for the 20-hour wall first. Most people drop out here.",
    },
    "P2": {
        "title": "Selection",
        "velocity": "High",
        "message": "You're passing rivals at full speed. Break through!",
    },
    "P3": {
        "title": "Habituation",
        "velocity": "Normal",
        "message": "Settled into the top 5%. From here it's you against yourself.",
    },
    "P4": {
        "title": "Mastery",
        "velocity": "Low",
        "message": "The quiet zone. Beat yesterday's self by 0.0001%.",
    },
}


def phase_for(hours: float) -> str:
    if hours < P1_LIMIT:
        return "P1"
    if hours < P2_LIMIT:
        return "P2"
    if hours < P3_LIMIT:
        return "P3"
    return "P4"


def _onboarding(hours):
    return 100 - hours


def _selection(hours):
    progress = (hours - P1_LIMIT) / (P2_LIMIT - P1_LIMIT)
    return 80 * math.pow(5 / 80, progress)


def _habituation(hours):
    progress = (hours - P2_LIMIT) / (P3_LIMIT - P2_LIMIT)
    return 5 - 4 * math.sqrt(progress)


def _mastery(hours):
    return 1000 / hours


CURVES = {
    "P1": _onboarding,
    "P2": _selection,
    "P3": _habituation,
    "P4": _mastery,
}


def clamp_percentile(percentile: float) -> float:
    return max(MIN_PERCENTILE, min(MAX_PERCENTILE, percentile))


def rank_in(population: int, percentile: float) -> int:
    return max(1, math.floor(population * (percentile / 100)))


def rank_ratio(percentile: float) -> int:
    """'1 in N people': 50% -> 2, 1% -> 100."""
    return math.floor(100 / percentile)


def percentile_from_hours(total_hours: float, population: int) -> PhaseReading:
    phase = phase_for(total_hours)
    curve = CURVES[phase]
    raw = curve(total_hours)
    percentile = clamp_percentile(raw)

    if phase == "P4":
        speed = MASTERY_SPEED
    else:
        # next second evaluated on the same curve, even across a boundary
        diff = raw - curve(total_hours + 1 / 3600)
        speed = (diff / 100) * population

    info = PHASES[phase]
    return PhaseReading(
        percentile=percentile,
        phase=phase,
        title=info["title"],
        velocity=info["velocity"],
        speed_per_second=speed,
        rank=rank_in(population, percentile),
        message=info["message"],
    )
