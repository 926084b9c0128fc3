"""Onboarding import: turn questionnaire answers into starter projects.

Each described project becomes an active project in the planning stage with
a "Next Steps" milestone holding one task per step, plus a "Project Notes"
entry when the user told us their focus or level.

The import is partial-success: items that cannot be imported are skipped
and counted, and every project is written in its own transaction.
"""

import logging
from uuid import uuid4

from pathos.db.connection import Database
from pathos.db.scoped import ScopedRepository
from pathos.models import utc_now
from pathos.onboarding.schemas import (
    OnboardingProject,
    OnboardingResult,
    PassionDetail,
    PassionDetailsRequest,
)
from pathos.passions.service import PassionService

logger = logging.getLogger(__name__)

NEXT_STEPS_TITLE = "Next Steps"
NOTES_TITLE = "Project Notes"


def build_note_content(detail: PassionDetail) -> str | None:
    """The starter note body, or None when there is nothing to say."""
    lines = []
    if detail.specific_area:
        lines.append(f"Specific focus: {detail.specific_area}")
    if detail.current_level:
        level = detail.current_level
        lines.append(f"Current level: {level[:1].upper()}{level[1:]}")
    return "\n".join(lines) or None


class OnboardingService:
    def __init__(self, db: Database, passions: PassionService) -> None:
        self._db = db
        self._passions = passions

    async def import_passion_details(
        self, user_id: str, request: PassionDetailsRequest,
    ) -> OnboardingResult:
        result = OnboardingResult()

        for passion_id, detail in request.passion_details.items():
            if not await self._passions.is_member(user_id, passion_id):
                logger.warning(
                    "Onboarding: skipping %d projects for passion %s not joined by %s",
                    len(detail.active_projects), passion_id, user_id,
                )
                result.skipped += len(detail.active_projects)
                continue

            note = build_note_content(detail)
            for project in detail.active_projects:
                steps = [s for s in project.next_steps if s.strip()]
                if not project.title.strip() or not steps:
                    logger.warning(
                        "Onboarding: skipping project %r under %s (blank title or steps)",
                        project.title, passion_id,
                    )
                    result.skipped += 1
                    continue
                await self._create_starter_project(user_id, passion_id, project, steps, note)
                result.projects_created += 1

        logger.info(
            "Onboarding for %s: %d projects created, %d skipped",
            user_id, result.projects_created, result.skipped,
        )
        return result

    async def _create_starter_project(
        self,
        user_id: str,
        passion_id: str,
        project: OnboardingProject,
        steps: list[str],
        note: str | None,
    ) -> None:
        now = utc_now()
        project_id = str(uuid4())
        milestone_id = str(uuid4())

        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            await repo.insert("projects", {
                "project_id": project_id,
                "passion_id": passion_id,
                "title": project.title,
                "description": project.description or None,
                "status": "active",
                "stage": "planning",
                "privacy": "public",
                "created_at": now,
                "updated_at": now,
            })
            await repo.insert("milestones", {
                "milestone_id": milestone_id,
                "project_id": project_id,
                "title": NEXT_STEPS_TITLE,
                "description": f"Initial steps for {project.title}",
                "status": "planned",
                "sort_order": 0,
                "created_at": now,
            })
            for i, step in enumerate(steps):
                await repo.insert("tasks", {
                    "task_id": str(uuid4()),
                    "project_id": project_id,
                    "milestone_id": milestone_id,
                    "title": step,
                    "completed": 0,
                    "sort_order": i,
                    "created_at": now,
                })
            if note is not None:
                await repo.insert("entries", {
                    "entry_id": str(uuid4()),
                    "project_id": project_id,
                    "title": NOTES_TITLE,
                    "content": note,
                    "type": "note",
                    "privacy": "public",
                    "published_at": now,
                    "created_at": now,
                })
