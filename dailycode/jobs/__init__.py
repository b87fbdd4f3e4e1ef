"""Background jobs package.

This package triggers the engine's batch operations on a schedule:
recommendation generation, mastery sweeps, cleanup and weekly analysis.
"""

from dailycode.jobs.scheduler import JobScheduler, get_scheduler

__all__ = ["JobScheduler", "get_scheduler"]
