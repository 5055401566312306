from __future__ import annotations
from typing import Dict, Mapping

COUNT_DURATION = 2.0   # seconds for a counter to reach its target
TICK_INTERVAL = 0.02


def counter_value(target: float, elapsed: float, duration: float = COUNT_DURATION) -> float:
    """Linear count-up from 0 to ``target`` over ``duration`` seconds, clamped at both ends."""
    if duration <= 0 or elapsed >= duration:
        return float(target)
    if elapsed <= 0:
        return 0.0
    return target * (elapsed / duration)


def counter_values(
    targets: Mapping[str, float], elapsed: float, duration: float = COUNT_DURATION
) -> Dict[str, float]:
    return {k: counter_value(v, elapsed, duration) for k, v in targets.items()}


def is_finished(elapsed: float, duration: float = COUNT_DURATION) -> bool:
    return elapsed >= duration


def format_count(value: float) -> str:
    return f"{round(value):,}"
