"""Result values returned by the Engine API. Failures are values, never exceptions."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from dispatch_kernel.models.assignment import Assignment


class DispatchError(str, Enum):
    UNKNOWN_ACTIVITY = "unknown_activity"   # Activity key not in the catalog
    ALREADY_ASSIGNED = "already_assigned"   # Agent already keys the assignment table
    FACILITY_UNMET = "facility_unmet"       # Facility missing, locked or under-levelled
    NOT_ASSIGNED = "not_assigned"           # Cancel target has no active task


class FacilityCheck(BaseModel):
    """Outcome of checking an activity's facility gate."""

    satisfied: bool
    reason: Optional[str] = None            # Human-readable, set when not satisfied
    required_facility: Optional[str] = None
    required_level: Optional[int] = None
    current_level: Optional[int] = None


class DispatchResult(BaseModel):
    """Outcome of a dispatch() call."""

    success: bool
    assignment: Optional[Assignment] = None
    error: Optional[DispatchError] = None   # Machine-readable
    reason: Optional[str] = None            # Human-readable
    required_facility: Optional[str] = None
    required_level: Optional[int] = None
    current_level: Optional[int] = None


class CancelResult(BaseModel):
    """Outcome of a cancel() call."""

    success: bool
    assignment: Optional[Assignment] = None
    error: Optional[DispatchError] = None
    reason: Optional[str] = None


class RestResult(BaseModel):
    """Outcome of a rest() call."""

    agent_id: str
    previous_fatigue: float
    new_fatigue: float


class Suitability(BaseModel):
    """Advisory check for caller-side gating. Never blocks dispatch."""

    suitable: bool
    reasons: List[str] = []                 # Why the agent is unsuitable
    warnings: List[str] = []                # Non-blocking concerns
