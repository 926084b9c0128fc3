"""Milestone progress, derived on every read and never stored."""

from collections.abc import Iterable

from pydantic import BaseModel


class ProgressCount(BaseModel):
    completed: int = 0
    total: int = 0
    percent: int = 0  # 0..100, 0 when total is 0


class MilestoneProgress(BaseModel):
    tasks: ProgressCount
    children: ProgressCount


def progress_count(completed: int, total: int) -> ProgressCount:
    """Counts plus a rounded percentage. An empty set is 0%, never a division error."""
    if total <= 0:
        return ProgressCount(completed=0, total=0, percent=0)
    return ProgressCount(
        completed=completed,
        total=total,
        percent=round(completed * 100 / total),
    )


def compute_progress(tasks: Iterable[dict], children: Iterable[dict]) -> MilestoneProgress:
    """Progress over a milestone's own tasks and its direct child milestones.

    Grandchildren do not count; each level reports only what hangs directly
    off it.
    """
    tasks = list(tasks)
    children = list(children)
    return MilestoneProgress(
        tasks=progress_count(
            sum(1 for t in tasks if t["completed"]), len(tasks),
        ),
        children=progress_count(
            sum(1 for c in children if c["status"] == "completed"), len(children),
        ),
    )
