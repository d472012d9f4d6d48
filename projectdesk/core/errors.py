from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError


class ProjectDeskError(Exception):
    """Base error. Rendered to callers as {"message": ...} with `status_code`."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ProjectDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationFailedError(ProjectDeskError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthenticationError(ProjectDeskError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class DuplicateEmailError(ProjectDeskError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "A user with this email already exists"


class UnexpectedError(ProjectDeskError):
    pass


def format_validation_message(model_name: str, exc: ValidationError | RequestValidationError) -> str:
    """
    Flattens pydantic errors into a single line, e.g.
    "Project validation failed: title: Field required, status: Input should be ..."
    """
    parts = []
    for error in exc.errors():
        # Request validation errors are prefixed with their location ("body", ...)
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid value')}")
    return f"{model_name} validation failed: " + ", ".join(parts)


async def project_desk_error_handler(request: Request, exc: ProjectDeskError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": format_validation_message("Request", exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProjectDeskError, project_desk_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
