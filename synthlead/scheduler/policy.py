"""Time-of-day policy: active hours, peak weighting, backoff and extension."""
import random
from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel
from synthlead.config import SchedulerSettings


class ScheduleState(BaseModel):
    """In-memory scheduler state. Rebuilt from the wall clock on restart."""
    active_start_hour: int
    active_end_hour: int
    next_wake_at: Optional[datetime] = None
    cooling_off: bool = False
    last_status: Optional[str] = None
    last_interval_seconds: Optional[float] = None
    cycles_run: int = 0
    consecutive_exhaustions: int = 0

    @classmethod
    def initial(cls, settings: SchedulerSettings) -> "ScheduleState":
        return cls(
            active_start_hour=settings.active_start_hour,
            active_end_hour=settings.active_end_hour,
        )


def is_active(hour: int, settings: SchedulerSettings) -> bool:
    return settings.active_start_hour <= hour < settings.active_end_hour


def next_active_start(now: datetime, settings: SchedulerSettings) -> datetime:
    """Start of the next active window; ``now`` itself when already inside one."""
    if is_active(now.hour, settings):
        return now
    start_today = now.replace(hour=settings.active_start_hour, minute=0, second=0, microsecond=0)
    if now.hour >= settings.active_end_hour:
        return start_today + timedelta(days=1)
    return start_today


def seconds_until_active(now: datetime, settings: SchedulerSettings) -> float:
    """Zero inside the active window, otherwise the exact wait until it opens."""
    return (next_active_start(now, settings) - now).total_seconds()


def peak_weight(hour: int, settings: SchedulerSettings) -> float:
    """Multiplier of the first band containing ``hour``; 1.0 outside every band."""
    for band in settings.peak_bands:
        if band.contains(hour):
            return band.weight
    return 1.0


def weighted_interval(hour: int, rng: random.Random, settings: SchedulerSettings) -> float:
    """Seconds until the next cycle: a uniform draw shortened by the peak weight."""
    base_minutes = rng.uniform(settings.min_interval_minutes, settings.max_interval_minutes)
    return base_minutes / peak_weight(hour, settings) * 60.0


def extended_interval(interval_seconds: float, settings: SchedulerSettings) -> float:
    """Stretch an interval after an exhausted cycle, capped at the maximum interval."""
    cap = settings.max_interval_minutes * 60.0
    return min(interval_seconds * settings.exhaustion_extension, cap)


def backoff_delay(retry_count: int, settings: SchedulerSettings) -> float:
    return settings.backoff_base_seconds * (2 ** retry_count)
