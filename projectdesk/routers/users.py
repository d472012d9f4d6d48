from fastapi import APIRouter, Depends, Path, status

from ..core.errors import NotFoundError
from ..db.mongodb import DataBase, get_database
from ..models.users import UserCreate, UserInDB
from ..services.user_service import UserService
from ..utils.dependencies import get_current_user, parse_object_id

router = APIRouter()


async def get_user_service(database: DataBase = Depends(get_database)) -> UserService:
    """Dependency to get a UserService bound to the app's database."""
    return UserService(database)


@router.post("", response_model=UserInDB, status_code=status.HTTP_201_CREATED)
async def create_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
):
    """Registers a user. Emails are unique."""
    return await service.create_user(user)


@router.get("/me", response_model=UserInDB)
async def read_current_user(current_user: UserInDB = Depends(get_current_user)):
    return current_user


@router.get("/{user_id}", response_model=UserInDB)
async def read_user_by_id(
    user_id: str = Path(..., description="The BSON ObjectId of the user as a string"),
    service: UserService = Depends(get_user_service),
):
    """Retrieves a specific user by ID."""
    user_oid = parse_object_id(user_id)
    user = await service.get_user(user_oid) if user_oid else None
    if user:
        return user
    raise NotFoundError("User not found")
