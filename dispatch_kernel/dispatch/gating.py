"""Facility gate — whether an activity's required facility is available."""

from typing import Any, Optional

from dispatch_kernel.collaborators.interfaces import FacilityInfo, FacilityProvider
from dispatch_kernel.models.catalog import ActivityDefinition
from dispatch_kernel.models.results import FacilityCheck


def _coerce_info(info: Any) -> Optional[FacilityInfo]:
    """Accept FacilityInfo models or plain mappings from the facility layer."""
    if info is None or isinstance(info, FacilityInfo):
        return info
    return FacilityInfo.model_validate(info)


def check_facility_requirement(
    activity: ActivityDefinition,
    provider: Optional[FacilityProvider],
) -> FacilityCheck:
    """
    Check an activity's facility requirement.

    Without a facility provider every requirement is satisfied, so engines
    embedded without a facility layer still work.
    """
    facility_id = activity.required_facility
    if not facility_id or provider is None:
        return FacilityCheck(satisfied=True)

    required_level = activity.required_facility_level
    info = _coerce_info(provider.get_facility_info(facility_id))

    if info is None:
        return FacilityCheck(
            satisfied=False,
            reason=f"Facility '{facility_id}' does not exist.",
            required_facility=facility_id,
            required_level=required_level,
        )

    if not info.unlocked:
        reason = f"Facility {info.name} is not unlocked yet."
        if info.unlock_at_inn_level is not None:
            reason += f" Unlocks at inn level {info.unlock_at_inn_level}."
        return FacilityCheck(
            satisfied=False,
            reason=reason,
            required_facility=facility_id,
            required_level=required_level,
            current_level=info.level,
        )

    if info.level < required_level:
        return FacilityCheck(
            satisfied=False,
            reason=(
                f"Facility {info.name} level too low "
                f"(current {info.level}, required {required_level})."
            ),
            required_facility=facility_id,
            required_level=required_level,
            current_level=info.level,
        )

    return FacilityCheck(
        satisfied=True,
        required_facility=facility_id,
        required_level=required_level,
        current_level=info.level,
    )
