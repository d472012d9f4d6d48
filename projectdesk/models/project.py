from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, Field, StringConstraints, field_validator

from .base import PyObjectId, common_config
from .users import UserSummary

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Keys a client may never write through the update path
PROTECTED_FIELDS = ("_id", "id", "team", "createdBy", "created_by", "createdAt", "created_at",
                    "updatedAt", "updated_at")


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class TeamRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


def _truncate_to_date(value: Any) -> Any:
    # Accept full ISO datetimes ("2024-05-01T00:00:00.000Z") as calendar dates
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class ProjectCreate(BaseModel):
    """Body of POST /api/projects. Unknown keys (including status) are ignored."""
    title: NonEmptyStr
    description: NonEmptyStr
    start_date: date
    end_date: date
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)
    team_members_by_email: List[str] = Field(default_factory=list)

    model_config = common_config

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, v):
        return _truncate_to_date(v)

    @field_validator("is_public", "tags", "team_members_by_email", mode="before")
    @classmethod
    def null_means_default(cls, v, info):
        if v is None:
            return [] if info.field_name != "is_public" else False
        return v


class ProjectUpdate(BaseModel):
    """Partial update. Only keys present in the body are applied."""
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None

    model_config = common_config

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, v):
        return _truncate_to_date(v)

    @field_validator("title", "description", "status", "start_date", "end_date", "is_public", "tags")
    @classmethod
    def not_null(cls, v):
        # Defaults are not validated, so this only fires for an explicit null
        if v is None:
            raise ValueError("may not be null")
        return v


# A stored reference is served either as its id string or, once expanded,
# as {_id, name, email}. Dangling references expand to null.
UserRef = Union[UserSummary, str, None]


def _ref_to_str(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


class TeamMember(BaseModel):
    user: UserRef
    role: TeamRole

    model_config = common_config

    @field_validator("user", mode="before")
    @classmethod
    def stringify_ref(cls, v):
        return _ref_to_str(v)


class ProjectOut(BaseModel):
    id: PyObjectId = Field(alias="_id")
    title: str
    description: str
    status: ProjectStatus = ProjectStatus.ACTIVE
    start_date: datetime
    end_date: datetime
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)
    created_by: UserRef
    team: List[TeamMember] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = common_config

    @field_validator("created_by", mode="before")
    @classmethod
    def stringify_ref(cls, v):
        return _ref_to_str(v)
