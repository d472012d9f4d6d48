from typing import Callable, Dict, List

from projectdesk.client.api import ApiError, ProjectApiClient

PROJECTS_ROUTE = "/projects"
FALLBACK_ERROR = "Failed to create project"
DRAFT_FIELDS = ("title", "description", "status", "startDate", "endDate")


class CreateProjectForm:
    """
    State behind the "Create New Project" page.

    Every field is required; submission is blocked while any is empty or while
    a request is already in flight. On success the form navigates to the
    project listing; on failure it keeps the draft and shows the server's
    message (or a fallback) so the user can retry.
    """

    def __init__(self, api: ProjectApiClient, navigate: Callable[[str], None]):
        self.api = api
        self.navigate = navigate
        self.draft: Dict[str, str] = {
            "title": "",
            "description": "",
            "status": "active",
            "startDate": "",
            "endDate": "",
        }
        self.error = ""
        self.loading = False

    def change(self, name: str, value: str) -> None:
        if name not in DRAFT_FIELDS:
            raise KeyError(name)
        self.draft = {**self.draft, name: value}

    def missing_fields(self) -> List[str]:
        return [name for name in DRAFT_FIELDS if not self.draft[name]]

    @property
    def can_submit(self) -> bool:
        return not self.loading and not self.missing_fields()

    @property
    def submit_disabled(self) -> bool:
        return self.loading

    @property
    def cancel_disabled(self) -> bool:
        return self.loading

    @property
    def submit_label(self) -> str:
        return "Creating..." if self.loading else "Create Project"

    def submit(self) -> bool:
        if not self.can_submit:
            return False

        self.error = ""
        self.loading = True
        try:
            self.api.create_project(dict(self.draft))
        except ApiError as e:
            self.error = e.message or FALLBACK_ERROR
            self.loading = False
            return False
        except Exception:
            self.error = FALLBACK_ERROR
            self.loading = False
            raise
        # The page is about to be replaced; leave state as is
        self.navigate(PROJECTS_ROUTE)
        return True

    def cancel(self) -> None:
        if not self.cancel_disabled:
            self.navigate(PROJECTS_ROUTE)
