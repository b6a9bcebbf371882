"""Roster — static display names and starting skill levels for hireable characters."""

from typing import Dict, List, Mapping, Optional

UNKNOWN_NAME = "unknown"


class Roster:
    """Immutable name/skill table. Ids not on the roster resolve to UNKNOWN_NAME."""

    def __init__(
        self,
        names: Mapping[str, str],
        starting_skills: Optional[Mapping[str, Mapping[str, int]]] = None,
    ):
        self._names: Dict[str, str] = dict(names)
        self._skills: Dict[str, Dict[str, int]] = {
            agent_id: dict(skills)
            for agent_id, skills in (starting_skills or {}).items()
        }

    def name(self, agent_id: str) -> str:
        return self._names.get(agent_id, UNKNOWN_NAME)

    def starting_skills(self, agent_id: str) -> Dict[str, int]:
        """A fresh copy of the agent's starting skills (empty for unknown agents)."""
        return dict(self._skills.get(agent_id, {}))

    def ids(self) -> List[str]:
        return list(self._names)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._names


def default_roster() -> Roster:
    return Roster(
        names={
            "001": "Lin Xiuran",
            "002": "Lin Yuyan",
            "003": "Wen Ruyu",
            "004": "Gu Qingluan",
            "005": "Su Miaoyin",
            "006": "Cui'er",
            "007": "Shen Qingshan",
            "008": "Xiao Tiefeng",
            "009": "Fang Wuji",
            "010": "Li Moran",
            "011": "Qin Wanrou",
        },
        starting_skills={
            "001": {"cooking": 3, "serving": 3, "greeting": 4, "cleaning": 3,
                    "security": 3, "accounting": 4},
            "002": {"cooking": 5, "prep": 5, "serving": 2},
            "003": {"cooking": 4, "serving": 5, "greeting": 5, "cleaning": 4,
                    "tidying": 5},
            "004": {"cooking": 3, "healing": 5, "security": 3},
            "005": {"cooking": 2, "serving": 2, "performing": 5},
            "006": {"cooking": 2, "serving": 4, "greeting": 4, "security": 4},
            "007": {"cooking": 4, "greeting": 5, "accounting": 4},
            "008": {"cooking": 1, "security": 5},
            "009": {"cooking": 2, "performing": 4, "accounting": 3},
            "010": {"cooking": 2, "accounting": 5},
            "011": {"cooking": 2, "serving": 2, "performing": 5},
        },
    )
