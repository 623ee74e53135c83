import pytest

from decay import rust_multiplier, rust_level, is_rusting, MS_PER_HOUR

LAST = 1_760_000_000_000


def after(hours):
    return LAST + int(hours * MS_PER_HOUR)


def test_never_active_has_no_rust() -> None:
    assert rust_multiplier(0, after(500)) == 1.0
    assert rust_level(0, after(500)) == 0.0


@pytest.mark.parametrize("hours", [0, 1, 12, 23.99])
def test_grace_window(hours) -> None:
    assert rust_multiplier(LAST, after(hours)) == 1.0


def test_stepwise_penalty() -> None:
    assert rust_multiplier(LAST, after(24)) == pytest.approx(0.95)
    assert rust_multiplier(LAST, after(47.9)) == pytest.approx(0.95)
    assert rust_multiplier(LAST, after(48)) == pytest.approx(0.9)
    assert rust_multiplier(LAST, after(71.9)) == pytest.approx(0.9)


@pytest.mark.parametrize("hours", [72, 73, 200, 10_000])
def test_floor_is_exact(hours) -> None:
    assert rust_multiplier(LAST, after(hours)) == 0.8


def test_never_increases_over_time() -> None:
    values = [rust_multiplier(LAST, after(h / 2)) for h in range(0, 400)]
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_rust_level_scales_between_one_and_three_days() -> None:
    assert rust_level(LAST, after(24)) == 0.0
    assert rust_level(LAST, after(48)) == pytest.approx(0.5)
    assert rust_level(LAST, after(96)) == 1.0


def test_is_rusting() -> None:
    assert not is_rusting(LAST, after(10))
    assert is_rusting(LAST, after(30))
