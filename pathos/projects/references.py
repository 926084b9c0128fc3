"""Cross-row reference checks shared by tasks, entries, and time entries."""

from pathos.db.scoped import ScopedRepository
from pathos.errors import (
    CrossProjectReferenceError,
    MilestoneNotFoundError,
    ProjectNotFoundError,
)


async def resolve_milestone_project(
    repo: ScopedRepository, project_id: str | None, milestone_id: str | None,
) -> str | None:
    """Check a (project, milestone) pair and return the effective project_id.

    A milestone given without a project places the row in the milestone's
    project. A milestone from a different project is rejected.
    """
    if project_id is not None and await repo.get("projects", project_id) is None:
        raise ProjectNotFoundError(project_id)
    if milestone_id is None:
        return project_id

    milestone = await repo.get("milestones", milestone_id)
    if milestone is None:
        raise MilestoneNotFoundError(milestone_id)
    if project_id is None:
        return milestone["project_id"]
    if milestone["project_id"] != project_id:
        raise CrossProjectReferenceError(milestone_id, project_id)
    return project_id
