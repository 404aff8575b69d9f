"""Quest catalogue with dependency queries.

Holds the static quest list in catalogue order, keyed by id, and encodes
quest-to-quest prerequisites as a DAG. The catalogue is validated when it
is built: ids must be unique, every prerequisite id must resolve, and the
prerequisite graph must be acyclic. A catalogue that fails any of these
cannot be planned, so the error surfaces before a run starts.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterable, Iterator

from quest_planner.models.quest import Quest
from quest_planner.models.requirement import SkillRequirement, amalgamate_requirements


class CatalogueError(ValueError):
    """Malformed quest catalogue data."""


class QuestCatalogue:
    """Ordered, read-only collection of quests.

    Nodes are quests; edges are QuestRequirement prerequisites. Skill
    thresholds are evaluated against a Player, not modelled as edges.
    """

    __slots__ = ("_quests", "_by_id", "_quest_deps", "_reverse_deps")

    def __init__(self) -> None:
        self._quests: tuple[Quest, ...] = ()
        self._by_id: dict[int, Quest] = {}
        self._quest_deps: dict[int, list[int]] = defaultdict(list)
        self._reverse_deps: dict[int, list[int]] = defaultdict(list)

    # --- Construction --------------------------------------------------------

    @classmethod
    def build(cls, quests: Iterable[Quest]) -> QuestCatalogue:
        """Build and validate the catalogue from quests in catalogue order."""
        catalogue = cls()
        ordered: list[Quest] = []

        for quest in quests:
            if quest.id in catalogue._by_id:
                raise CatalogueError(f"Duplicate quest id: {quest.id}")
            catalogue._by_id[quest.id] = quest
            ordered.append(quest)

            # Record quest→quest dependency edges.
            for req in quest.quest_requirements:
                dep_id = req.quest_id
                if dep_id not in catalogue._quest_deps[quest.id]:
                    catalogue._quest_deps[quest.id].append(dep_id)
                if quest.id not in catalogue._reverse_deps[dep_id]:
                    catalogue._reverse_deps[dep_id].append(quest.id)

        catalogue._quests = tuple(ordered)

        for quest_id, deps in catalogue._quest_deps.items():
            for dep_id in deps:
                if dep_id not in catalogue._by_id:
                    raise CatalogueError(
                        f"Quest {quest_id} requires unknown quest {dep_id}"
                    )

        order = catalogue.topological_order()
        if len(order) != len(catalogue._quests):
            cyclic = sorted(set(catalogue._by_id) - set(order))
            raise CatalogueError(f"Quest requirements form a cycle among: {cyclic}")

        return catalogue

    # --- Container protocol --------------------------------------------------

    def __iter__(self) -> Iterator[Quest]:
        return iter(self._quests)

    def __len__(self) -> int:
        return len(self._quests)

    def __contains__(self, quest_id: object) -> bool:
        return quest_id in self._by_id

    # --- Queries -------------------------------------------------------------

    @property
    def quests(self) -> tuple[Quest, ...]:
        return self._quests

    @property
    def real_quests(self) -> tuple[Quest, ...]:
        """All quests except placeholders."""
        return tuple(q for q in self._quests if not q.is_placeholder)

    def get(self, quest_id: int) -> Quest:
        """Return the quest with *quest_id*, raising KeyError if unknown."""
        try:
            return self._by_id[quest_id]
        except KeyError:
            raise KeyError(f"Unable to find quest with id: {quest_id}") from None

    def find_by_title(self, title: str) -> Quest | None:
        """Case-insensitive lookup by title or display name."""
        wanted = title.strip().casefold()
        for quest in self._quests:
            if quest.title.casefold() == wanted or quest.display_name.casefold() == wanted:
                return quest
        return None

    def topological_order(self) -> list[int]:
        """Return quest ids with prerequisites before dependents.

        Uses Kahn's algorithm, seeded in catalogue order. Quests caught in a
        cycle are left out.
        """
        in_degree: dict[int, int] = {q.id: 0 for q in self._quests}
        for qid, deps in self._quest_deps.items():
            for dep in deps:
                if dep in in_degree:
                    in_degree[qid] += 1

        queue: deque[int] = deque(qid for qid, deg in in_degree.items() if deg == 0)
        result: list[int] = []

        while queue:
            qid = queue.popleft()
            result.append(qid)
            for dependent in self._reverse_deps.get(qid, []):
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        return result

    def max_requirements(self, quests: Iterable[Quest] | None = None) -> list[SkillRequirement]:
        """Highest skill level needed per skill across *quests* (default: all)."""
        merged: list[SkillRequirement] = []
        for quest in self._quests if quests is None else quests:
            merged = amalgamate_requirements(merged, quest.skill_requirements)
        return merged

    def quest_points_for(self, quest_ids: Iterable[int]) -> int:
        """Total quest point reward of the known quests among *quest_ids*."""
        return sum(
            self._by_id[qid].rewards.quest_points
            for qid in quest_ids
            if qid in self._by_id
        )
