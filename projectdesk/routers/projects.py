import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Path, status

from ..core.errors import NotFoundError, UnexpectedError, ValidationFailedError
from ..db.mongodb import DataBase, get_database
from ..models.project import ProjectOut
from ..models.users import UserInDB
from ..services.project_service import ProjectService
from ..utils.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_project_service(database: DataBase = Depends(get_database)) -> ProjectService:
    """Dependency to get a ProjectService bound to the app's database."""
    return ProjectService(database)


@router.get("", response_model=List[ProjectOut])
async def read_projects(
    current_user: UserInDB = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Lists the requester's projects, newest first."""
    try:
        return await service.list_projects(current_user.id)
    except Exception as e:
        logger.exception(f"Error fetching projects: {e}")
        raise UnexpectedError("Error fetching projects")


@router.get("/{project_id}", response_model=ProjectOut)
async def read_project(
    project_id: str = Path(..., description="The BSON ObjectId of the project as a string"),
    current_user: UserInDB = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    try:
        return await service.get_project(project_id, current_user.id)
    except NotFoundError:
        raise
    except Exception as e:
        logger.exception(f"Error fetching project: {e}")
        raise UnexpectedError("Error fetching project")


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: Dict[str, Any] = Body(...),
    current_user: UserInDB = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """
    Creates a project owned by the requester. The requester joins the team as
    admin; `teamMembersByEmail` entries that match users are added as members.
    """
    try:
        return await service.create_project(data, current_user.id)
    except ValidationFailedError:
        raise
    except Exception as e:
        logger.exception(f"Error creating project: {e}")
        raise UnexpectedError("Error creating project")


async def _update(project_id: str, data: Dict[str, Any], current_user: UserInDB, service: ProjectService):
    try:
        return await service.update_project(project_id, data, current_user.id)
    except (NotFoundError, ValidationFailedError):
        raise
    except Exception as e:
        logger.exception(f"Error updating project: {e}")
        raise UnexpectedError("Error updating project")


@router.put("/{project_id}", response_model=ProjectOut)
async def update_project(
    project_id: str = Path(..., description="The BSON ObjectId of the project as a string"),
    data: Dict[str, Any] = Body(...),
    current_user: UserInDB = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Applies a partial update. Any `team` field in the body is ignored."""
    return await _update(project_id, data, current_user, service)


@router.patch("/{project_id}", response_model=ProjectOut)
async def patch_project(
    project_id: str = Path(..., description="The BSON ObjectId of the project as a string"),
    data: Dict[str, Any] = Body(...),
    current_user: UserInDB = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    return await _update(project_id, data, current_user, service)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str = Path(..., description="The BSON ObjectId of the project as a string"),
    current_user: UserInDB = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    try:
        await service.delete_project(project_id, current_user.id)
    except NotFoundError:
        raise
    except Exception as e:
        logger.exception(f"Error deleting project: {e}")
        raise UnexpectedError("Error deleting project")
    return {"message": "Project deleted successfully"}
