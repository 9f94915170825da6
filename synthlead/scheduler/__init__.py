"""Time-of-day weighted scheduling of generation cycles."""
from synthlead.scheduler.policy import ScheduleState
from synthlead.scheduler.runner import Scheduler

__all__ = ["ScheduleState", "Scheduler"]
