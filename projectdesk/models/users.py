from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from .base import PyObjectId, common_config, utcnow


class UserBase(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    email: EmailStr

    model_config = common_config


class UserCreate(UserBase):
    pass


class UserInDB(UserBase):
    id: PyObjectId = Field(alias="_id")
    # Stored users are trusted; don't re-run email validation on read
    email: str
    created_at: datetime = Field(default_factory=utcnow)


class UserSummary(BaseModel):
    """Expanded form of a user reference inside a project payload."""
    id: PyObjectId = Field(alias="_id")
    name: str
    email: str

    model_config = common_config
