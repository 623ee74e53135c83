# world_rank.py
# Rank resolution: tier interpolation, grind rank, overtakes and milestones.
import math

from population import MILESTONES, WORLD_POPULATION
from tiers import TIERS

# Picked so ~10,000 TGI lands around rank 8,000. Keep as is.
GRIND_DECAY_K = 0.00138


def rank_from_tgi(tgi: float, tiers=TIERS) -> int:
    """
    Interpolate a world rank between the two tiers bracketing `tgi`.

    Past the last tier the rank saturates at that tier's reference rank.
    """
    last = tiers[-1]
    if tgi >= last["min_tgi"]:
        return last["rank"]

    lower, upper = tiers[0], tiers[1]
    for i in range(len(tiers) - 1):
        if tiers[i]["min_tgi"] <= tgi < tiers[i + 1]["min_tgi"]:
            lower, upper = tiers[i], tiers[i + 1]
            break

    progress = (tgi - lower["min_tgi"]) / (upper["min_tgi"] - lower["min_tgi"])
    rank = lower["rank"] - (lower["rank"] - upper["rank"]) * progress
    # below the first threshold never reads worse than the first tier
    rank = min(rank, tiers[0]["rank"])
    return math.floor(max(1, rank))


def rank_from_total_tgi(total_tgi: float, population: int = WORLD_POPULATION) -> int:
    """World rank after grinding: exponential fall from the full population."""
    return math.floor(max(1, population * math.exp(-GRIND_DECAY_K * total_tgi)))


def overtaken_count(rank_before: int, rank_after: int) -> int:
    return max(0, rank_before - rank_after)


def crossed_milestones(rank_before: int, rank_after: int, milestones=MILESTONES):
    """Milestones passed while moving from rank_before to rank_after, largest first."""
    crossed = [
        m for m in milestones
        if m["population"] < rank_before and m["population"] >= rank_after
    ]
    return sorted(crossed, key=lambda m: m["population"], reverse=True)


def next_milestone(rank: int, milestones=MILESTONES) -> dict:
    """The biggest milestone still ahead of `rank`; the smallest one once all are passed."""
    ordered = sorted(milestones, key=lambda m: m["population"], reverse=True)
    return next((m for m in ordered if m["population"] < rank), ordered[-1])


def people_to_overtake(rank: int, milestone: dict) -> int:
    return max(0, rank - milestone["population"])
