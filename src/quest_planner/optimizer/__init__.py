"""Quest path planning interfaces."""

from quest_planner.optimizer.path import Path, PathStats
from quest_planner.optimizer.path_finder import (
    ActionSink,
    PathFinder,
    QuestNotFoundError,
    plan,
)

__all__ = [
    "ActionSink",
    "Path",
    "PathFinder",
    "PathStats",
    "QuestNotFoundError",
    "plan",
]
