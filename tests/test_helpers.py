import pytest

import rank_storage
import storage
from decay import MS_PER_HOUR
from helpers import (
    calculate_streak, last_activity_at, running_seconds, total_seconds,
    today_seconds, activity_state_for, motivation_for_streak, format_clock,
    format_mmss, format_rank, toggle_user_reminders, get_rusting_users,
)
from population import population_for, bucket_label, WORLD_POPULATION
from ranks import level_for, level_progress

DAY = 24 * MS_PER_HOUR


def sessions_at(*ends):
    return [{"end_time": e, "duration_seconds": 600, "theme_id": "t"} for e in ends]


# ---------- streaks ----------
def test_streak_counts_consecutive_days(noon) -> None:
    assert calculate_streak(sessions_at(noon, noon - DAY, noon - 2 * DAY), noon) == 3


def test_streak_same_day_counts_once(noon) -> None:
    assert calculate_streak(sessions_at(noon, noon - MS_PER_HOUR), noon) == 1


def test_streak_survives_until_end_of_next_day(noon) -> None:
    assert calculate_streak(sessions_at(noon - DAY, noon - 2 * DAY), noon) == 2


def test_streak_broken_by_gap(noon) -> None:
    assert calculate_streak(sessions_at(noon, noon - 2 * DAY), noon) == 1
    assert calculate_streak(sessions_at(noon - 2 * DAY), noon) == 0
    assert calculate_streak([], noon) == 0


# ---------- records ----------
def make_record():
    record = storage.user_record({}, "42")
    theme = storage.add_theme(record, "Piano", "🎹", 0)
    return record, theme


def test_session_rolls_into_theme_total(noon) -> None:
    record, theme = make_record()
    storage.add_session(record, theme, noon - 1_800_000, noon)
    storage.add_session(record, theme, noon - DAY - 600_000, noon - DAY)
    assert theme["total_seconds"] == 2400
    assert total_seconds(record) == 2400
    assert today_seconds(record, None, noon) == 1800
    # newest first
    assert record["sessions"][0]["end_time"] == noon


def test_last_activity_prefers_the_latest_event(noon) -> None:
    record, theme = make_record()
    assert last_activity_at(record) == 0
    storage.add_session(record, theme, noon - 60_000, noon)
    storage.add_sharpen_log(record, "write one line", noon + 5_000)
    assert last_activity_at(record) == noon + 5_000


def test_running_stopwatch(noon) -> None:
    record, theme = make_record()
    assert running_seconds(record, noon) == 0
    record["stopwatch"] = {"theme_id": theme["id"], "started_at": noon - 90_000}
    assert running_seconds(record, noon) == 90
    assert running_seconds(record, noon, theme["id"]) == 90
    assert running_seconds(record, noon, "other") == 0


def test_activity_state_for_record(noon) -> None:
    record, theme = make_record()
    storage.add_session(record, theme, noon - 3_600_000, noon)
    storage.add_sharpen_log(record, "play one scale", noon)
    record["stopwatch"] = {"theme_id": theme["id"], "started_at": noon}
    state = activity_state_for(record, noon + 60_000)
    assert state.total_active_seconds == 3660
    assert state.total_actions == 1
    assert state.streak_days == 1
    assert state.last_activity_ms == noon


def test_find_theme_by_name_or_id() -> None:
    record, theme = make_record()
    assert storage.find_theme(record, " piano ") is theme
    assert storage.find_theme(record, theme["id"]) is theme
    assert storage.find_theme(record, "violin") is None


# ---------- persistence ----------
def test_storage_roundtrip(store) -> None:
    data = storage.load()
    assert data == {}
    storage.user_record(data, "7")["reminders"] = True
    storage.save(data)
    assert storage.load()["7"]["reminders"] is True


def test_corrupt_file_is_kept_aside(store) -> None:
    broken = '{"a": {"themes": []}, "b": {"themes": [}'
    storage.DATA_FILE.write_text(broken)
    data = storage.load()
    assert data == {}

    storage.user_record(data, "c")
    storage.save(data)
    aside = store / "progress.json.corrupt"
    assert aside.read_text() == broken
    assert set(storage.load()) == {"c"}


def test_back_dated_session_keeps_newest_first(noon) -> None:
    record, theme = make_record()
    storage.add_session(record, theme, noon - DAY - 60_000, noon - DAY)
    storage.add_session(record, theme, noon - 60_000, noon)
    storage.add_session(record, theme, noon - 2 * DAY - 60_000, noon - 2 * DAY)
    storage.add_session(record, theme, noon - MS_PER_HOUR - 60_000, noon - MS_PER_HOUR)
    ends = [s["end_time"] for s in record["sessions"]]
    assert ends == sorted(ends, reverse=True)


def test_reminder_toggle_and_rusting_users(store, noon) -> None:
    assert toggle_user_reminders("1") is True
    assert toggle_user_reminders("1") is False
    assert toggle_user_reminders("1") is True

    data = storage.load()
    record = storage.user_record(data, "1")
    storage.add_sharpen_log(record, "one push-up position", noon - 30 * MS_PER_HOUR)
    idle = storage.user_record(data, "2")
    storage.add_sharpen_log(idle, "one push-up position", noon - 80 * MS_PER_HOUR)
    storage.save(data)

    rusting = get_rusting_users(noon)
    # user 2 never opted in
    assert [uid for uid, _, _ in rusting] == ["1"]
    assert rusting[0][1] == pytest.approx(0.95)
    assert rusting[0][2] == pytest.approx(30)


def test_rank_storage_defaults_and_save(store) -> None:
    stats = rank_storage.load("9")
    assert stats["total_tgi"] == 0
    assert stats["current_rank"] == WORLD_POPULATION
    stats["total_tgi"] = 12.5
    rank_storage.save("9", stats)
    assert rank_storage.load("9")["total_tgi"] == 12.5
    assert set(rank_storage.load_everyone()) == {"9"}


def test_corrupt_grinding_file_starts_fresh(store) -> None:
    rank_storage.FILE.write_text("{not json")
    stats = rank_storage.load("1")
    assert stats["total_tgi"] == 0
    assert stats["current_rank"] == WORLD_POPULATION
    assert (store / "grinding.json.corrupt").read_text() == "{not json"

    rank_storage.save("1", dict(stats, total_tgi=4.0))
    assert rank_storage.load_everyone()["1"]["total_tgi"] == 4.0


# ---------- levels & populations ----------
def test_level_progress_from_zero() -> None:
    p = level_progress(0)
    assert p["current"]["name"] == "Beginner"
    assert p["next"]["name"] == "Amateur"
    assert p["percent"] == 0
    assert p["hours_to_next"] == 100
    assert p["hours_to_after"] == 500


def test_level_progress_past_legend() -> None:
    p = level_progress(7500 * 3600)
    assert p["current"]["name"] == "Legend"
    assert p["next"] is None
    assert p["hours_to_next"] == 7500
    assert p["hours_to_after"] is None


def test_level_for_boundaries() -> None:
    assert level_for(100 * 3600 - 1)["name"] == "Beginner"
    assert level_for(100 * 3600)["name"] == "Amateur"


def test_population_filters() -> None:
    assert population_for("global") == WORLD_POPULATION
    assert population_for("region", {"region": "Japan"}) == 124_000_000
    assert population_for("age", {}) == WORLD_POPULATION
    assert bucket_label("gender", {"gender": "Female"}) == "Gender: Female"
    with pytest.raises(ValueError):
        population_for("planet")


# ---------- formatting ----------
def test_formatting() -> None:
    assert format_clock(3661) == "01:01:01"
    assert format_mmss(125) == "02:05"
    assert format_rank(8_232_000_000) == "8,232,000,000"


def test_motivation_tiers() -> None:
    assert motivation_for_streak(0)[1] == "Start Now"
    assert motivation_for_streak(3)[1] == "Top 60%"
    assert motivation_for_streak(7)[1] == "Top 40%"
    assert motivation_for_streak(21)[1] == "Top 20%"
    assert motivation_for_streak(22)[1] == "Top 5% player"
