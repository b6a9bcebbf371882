"""Statistics record — running dispatch counters."""

from pydantic import BaseModel


class StatsRecord(BaseModel):
    total_tasks: int = 0
    successful_tasks: int = 0
    failed_tasks: int = 0
    total_experience_gained: float = 0.0
    cancelled_tasks: int = 0
