# odometer.py
# Rank counter animation frames. Any scheduler can replay them.
import math

LINEAR = "linear"
EASE_OUT = "ease-out"

# seconds a full animation should take
DURATIONS = {
    LINEAR: 1.0,
    EASE_OUT: 1.5,
}

# deltas below this jump straight to the target
MIN_ANIMATED_DELTA = 5


def _ease(mode, t):
    if mode == LINEAR:
        return t
    if mode == EASE_OUT:
        return 1 - math.pow(1 - t, 3)
    raise ValueError(f"Unknown odometer mode: {mode}")


def frames(previous: int, target: int, mode: str = LINEAR, steps: int = 20):
    """
    Yield the displayed values between `previous` and `target`.

    The sequence is finite, moves in one direction only, never passes the
    target and always ends on it exactly.
    """
    _ease(mode, 0.0)  # reject unknown modes before yielding anything
    diff = target - previous
    if abs(diff) < MIN_ANIMATED_DELTA or steps <= 1:
        yield target
        return

    last = previous
    for i in range(1, steps):
        value = math.floor(previous + diff * _ease(mode, i / steps))
        if value != last and value != target:
            last = value
            yield value
    yield target


def frame_delay(mode: str, steps: int) -> float:
    """Seconds to wait between two frames."""
    return DURATIONS[mode] / max(1, steps)
