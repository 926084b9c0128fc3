"""Error taxonomy shared by every service.

Each error carries a stable ``kind`` and the HTTP status the API layer
renders it with. Services raise these; routers let them propagate to the
handler registered in ``pathos.main``.
"""


class PathosError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


# -- 400 --


class ValidationError(PathosError):
    kind = "validation_error"
    status_code = 400

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class InvariantViolationError(PathosError):
    kind = "invariant_violation"
    status_code = 400


class SelfParentError(InvariantViolationError):
    def __init__(self, milestone_id: str) -> None:
        self.milestone_id = milestone_id
        super().__init__("Milestone cannot be its own parent")


class MilestoneCycleError(InvariantViolationError):
    def __init__(self, milestone_id: str, parent_id: str) -> None:
        self.milestone_id = milestone_id
        self.parent_id = parent_id
        super().__init__(
            f"Milestone {parent_id} is a descendant of {milestone_id}; "
            "reparenting would create a cycle"
        )


class CrossProjectReferenceError(InvariantViolationError):
    def __init__(
        self, ref_id: str, project_id: str | None, *, ref_kind: str = "Milestone",
    ) -> None:
        self.ref_id = ref_id
        self.project_id = project_id
        super().__init__(f"{ref_kind} {ref_id} does not belong to project {project_id}")


class EndBeforeStartError(InvariantViolationError):
    def __init__(self) -> None:
        super().__init__("End time must be after start time")


# -- 401 / 403 --


class UnauthorizedError(PathosError):
    kind = "unauthorized"
    status_code = 401

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(detail)


class PermissionDeniedError(PathosError):
    kind = "forbidden"
    status_code = 403


class PassionNotJoinedError(PermissionDeniedError):
    def __init__(self, passion_id: str) -> None:
        self.passion_id = passion_id
        super().__init__("You must add this passion to your interests first")


# -- 404: absent and foreign are deliberately the same error --


class NotFoundError(PathosError):
    kind = "not_found"
    status_code = 404
    entity = "Record"

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class UserNotFoundError(NotFoundError):
    entity = "User"


class PassionNotFoundError(NotFoundError):
    entity = "Passion"


class UserPassionNotFoundError(NotFoundError):
    entity = "User passion"


class ProjectNotFoundError(NotFoundError):
    entity = "Project"


class MilestoneNotFoundError(NotFoundError):
    entity = "Milestone"


class ParentNotFoundError(NotFoundError):
    entity = "Parent milestone"


class TaskNotFoundError(NotFoundError):
    entity = "Task"


class EntryNotFoundError(NotFoundError):
    entity = "Entry"


# -- 409 --


class ConflictError(PathosError):
    kind = "conflict"
    status_code = 409


class UsernameTakenError(ConflictError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username already exists")


class EmailTakenError(ConflictError):
    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email already registered")


class SlugConflictError(ConflictError):
    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Passion slug already taken: {slug}")


class DuplicateUserPassionError(ConflictError):
    def __init__(self, passion_id: str) -> None:
        self.passion_id = passion_id
        super().__init__("User already has this passion")


# -- 503 --


class UpstreamFailureError(PathosError):
    kind = "upstream_failure"
    status_code = 503
