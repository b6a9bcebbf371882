"""
Progress Tracker — advances in-progress assignments by an elapsed-time step.

  progress += (delta_time / duration) * speed_multiplier

Progress is clamped at 1.0, never wrapped, so one advance can complete an
assignment at most once however large delta_time is.
"""

from typing import Iterable, List

from dispatch_kernel.models.assignment import Assignment, AssignmentStatus


class ProgressTracker:
    def advance(
        self, assignments: Iterable[Assignment], delta_time: float
    ) -> List[Assignment]:
        """
        Advance every in-progress assignment.
        Returns the assignments that crossed completion during this step.
        """
        if delta_time <= 0:
            return []

        completed = []
        for assignment in assignments:
            if assignment.status != AssignmentStatus.IN_PROGRESS:
                continue

            step = (delta_time / assignment.duration) * assignment.efficiency.speed_multiplier
            assignment.progress = min(1.0, assignment.progress + step)

            if assignment.progress >= 1.0:
                assignment.status = AssignmentStatus.COMPLETED
                completed.append(assignment)

        return completed

    @staticmethod
    def remaining_time(assignment: Assignment) -> float:
        """Game seconds until completion at the frozen speed."""
        if assignment.status != AssignmentStatus.IN_PROGRESS:
            return 0.0
        remaining = 1.0 - assignment.progress
        return remaining * assignment.duration / assignment.efficiency.speed_multiplier
