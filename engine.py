# engine.py
# Snapshot assembly: everything a rank view needs from one ActivityState.
from population import WORLD_POPULATION
from schema import ActivityState, RankSnapshot, SlashResult
from decay import rust_multiplier
from tgi import compute_tgi, session_tgi
from tiers import current_tier
from phases import percentile_from_hours
from world_rank import (
    rank_from_tgi, rank_from_total_tgi, overtaken_count,
    crossed_milestones, next_milestone,
)


def activity_state(total_active_seconds=0, total_actions=0, streak_days=0,
                   last_activity_ms=0) -> ActivityState:
    """Build an ActivityState, clamping missing or negative inputs to 0."""
    return ActivityState(
        total_active_seconds=max(0, int(total_active_seconds or 0)),
        total_actions=max(0, int(total_actions or 0)),
        streak_days=max(0, int(streak_days or 0)),
        last_activity_ms=max(0, int(last_activity_ms or 0)),
    )


def snapshot(state: ActivityState, now_ms: int,
             population: int = WORLD_POPULATION) -> RankSnapshot:
    multiplier = rust_multiplier(state.last_activity_ms, now_ms)
    duration_minutes = state.total_active_seconds // 60
    tgi = compute_tgi(state.total_actions, state.streak_days, duration_minutes, multiplier)
    rank = rank_from_tgi(tgi)

    reading = percentile_from_hours(state.total_active_seconds / 3600, population)

    return RankSnapshot(
        rank=rank,
        percentile=reading.percentile,
        phase=reading.phase,
        decay_multiplier=multiplier,
        tgi=tgi,
        tier=current_tier(tgi),
        realtime_rank=reading.rank,
        population=population,
        next_milestone=next_milestone(rank),
    )


def default_grinding_stats() -> dict:
    return {
        "total_tgi": 0.0,
        "current_rank": WORLD_POPULATION,
        "last_slashed_at": 0,
        "best_rank": WORLD_POPULATION,
    }


def commit_grind(stats: dict, elapsed_seconds: int, now_ms: int):
    """
    Close a grind session.

    Returns (SlashResult, new_stats); `stats` itself is left untouched.
    """
    earned = session_tgi(elapsed_seconds)
    total = stats["total_tgi"] + earned
    rank_before = stats["current_rank"]
    rank_after = rank_from_total_tgi(total)

    result = SlashResult(
        duration_sec=elapsed_seconds,
        earned_tgi=earned,
        rank_before=rank_before,
        rank_after=rank_after,
        overtaken_count=overtaken_count(rank_before, rank_after),
        crossed=crossed_milestones(rank_before, rank_after),
    )
    new_stats = dict(
        stats,
        total_tgi=total,
        current_rank=rank_after,
        last_slashed_at=now_ms,
        best_rank=min(stats.get("best_rank", rank_after), rank_after),
    )
    return result, new_stats
