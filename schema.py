# schema.py
# Engine inputs and outputs
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ActivityState:
    total_active_seconds: int = 0
    total_actions: int = 0
    streak_days: int = 0
    last_activity_ms: int = 0  # 0 = never


@dataclass(frozen=True)
class PhaseReading:
    percentile: float
    phase: str          # P1|P2|P3|P4
    title: str
    velocity: str       # Low|Normal|High
    speed_per_second: float
    rank: int
    message: str


@dataclass(frozen=True)
class RankSnapshot:
    rank: int
    percentile: float
    phase: str
    decay_multiplier: float
    tgi: float
    tier: Dict[str, Any]
    realtime_rank: int
    population: int
    next_milestone: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class SlashResult:
    duration_sec: int
    earned_tgi: float
    rank_before: int
    rank_after: int
    overtaken_count: int
    crossed: List[Dict[str, Any]] = field(default_factory=list)
