"""
Persistence Adapter — serialize and restore all mutable engine state.

Behavioral Contract:
- Output is plain JSON-compatible data (SaveData dumped in json mode)
- Frozen efficiency snapshots of in-flight assignments are kept verbatim
- Restoring is all-or-nothing: a payload that fails validation raises
  SaveDataError before any engine state is touched
"""

import json
import logging
from typing import Dict, List, Mapping, Union

from pydantic import ValidationError

from dispatch_kernel.agents.registry import AgentRegistry
from dispatch_kernel.models.assignment import Assignment, AssignmentStatus
from dispatch_kernel.models.persistence import SaveData
from dispatch_kernel.statistics.aggregator import StatisticsAggregator

logger = logging.getLogger(__name__)


class SaveDataError(Exception):
    """Raised when save data cannot be restored."""
    pass


def build_save_data(
    assignments: Mapping[str, Assignment],
    registry: AgentRegistry,
    statistics: StatisticsAggregator,
) -> SaveData:
    """Capture the current engine state as a SaveData model (deep-copied)."""
    return SaveData(
        assignments={
            agent_id: a.model_copy(deep=True) for agent_id, a in assignments.items()
        },
        history={
            agent_id: [e.model_copy() for e in entries]
            for agent_id, entries in registry.all_history().items()
        },
        agents={
            agent_id: agent.model_copy(deep=True)
            for agent_id, agent in registry.all_agents().items()
        },
        statistics=statistics.snapshot(),
    )


def dump_save_data(save: SaveData) -> dict:
    return save.model_dump(mode="json")


def parse_save_data(data: Union[SaveData, Mapping, str, bytes]) -> SaveData:
    """
    Validate a save payload (model, mapping or JSON text).
    Raises SaveDataError on schema violations or broken invariants.
    """
    try:
        if isinstance(data, SaveData):
            save = SaveData.model_validate(data.model_dump())
        elif isinstance(data, (str, bytes)):
            save = SaveData.model_validate_json(data)
        else:
            save = SaveData.model_validate(dict(data))
    except (ValidationError, TypeError, ValueError, json.JSONDecodeError) as e:
        logger.warning("Rejected save data: %s", e)
        raise SaveDataError(f"Invalid save data: {e}") from e

    problems = _find_inconsistencies(save)
    if problems:
        logger.warning("Rejected save data: %s", "; ".join(problems))
        raise SaveDataError("Inconsistent save data: " + "; ".join(problems))

    return save


def _find_inconsistencies(save: SaveData) -> List[str]:
    problems = []
    for key, assignment in save.assignments.items():
        if assignment.agent_id != key:
            problems.append(
                f"assignment {assignment.id} keyed under {key} "
                f"but belongs to {assignment.agent_id}"
            )
        if assignment.status != AssignmentStatus.IN_PROGRESS:
            problems.append(f"assignment {assignment.id} is not in progress")
    for key, agent in save.agents.items():
        if agent.id != key:
            problems.append(f"agent state keyed under {key} has id {agent.id}")
    return problems


def restore_save_data(
    save: SaveData,
    registry: AgentRegistry,
    statistics: StatisticsAggregator,
) -> Dict[str, Assignment]:
    """Push validated save data into the registry and aggregator.
    Returns the restored assignment table."""
    registry.replace_all(
        agents={k: v.model_copy(deep=True) for k, v in save.agents.items()},
        history={k: list(v) for k, v in save.history.items()},
    )
    statistics.restore(save.statistics)
    return {k: v.model_copy(deep=True) for k, v in save.assignments.items()}
