"""Statistics Aggregator — running counters over resolved and cancelled tasks."""

from typing import Optional

from dispatch_kernel.models.statistics import StatsRecord


class StatisticsAggregator:
    def __init__(self, record: Optional[StatsRecord] = None):
        self._record = record or StatsRecord()

    def record_outcome(self, success: bool, experience_gained: float) -> None:
        """Count one resolved task."""
        self._record.total_tasks += 1
        if success:
            self._record.successful_tasks += 1
        else:
            self._record.failed_tasks += 1
        self._record.total_experience_gained += experience_gained

    def record_cancellation(self) -> None:
        self._record.cancelled_tasks += 1

    @property
    def success_rate(self) -> float:
        if self._record.total_tasks == 0:
            return 0.0
        return self._record.successful_tasks / self._record.total_tasks

    def snapshot(self) -> StatsRecord:
        """A copy of the counters; mutating it does not affect the aggregator."""
        return self._record.model_copy()

    def restore(self, record: StatsRecord) -> None:
        self._record = record.model_copy()
