"""Activity Definition — one entry in the Task Catalog."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityDefinition(BaseModel):
    """A kind of work an agent can be dispatched to. Loaded once, never mutated."""

    model_config = ConfigDict(frozen=True)

    type: str                               # e.g., "cooking"
    display_name: str
    category: str                           # e.g., "kitchen", "service"
    nominal_duration: float = Field(gt=0)   # Game-time seconds at speed 1.0
    required_facility: Optional[str] = None
    required_facility_level: int = Field(ge=0, default=1)
