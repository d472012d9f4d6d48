from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, Header

from projectdesk.core.errors import AuthenticationError
from projectdesk.db.mongodb import DataBase, get_database
from projectdesk.models.users import UserInDB


def parse_object_id(id_str) -> Optional[ObjectId]:
    """
    Converts an ID string to a BSON ObjectId, or None if it isn't one.
    Callers decide what a malformed id means; for projects it is "not found".
    """
    if isinstance(id_str, ObjectId):
        return id_str
    if not id_str or not isinstance(id_str, str):
        return None
    try:
        return ObjectId(id_str)
    except InvalidId:
        return None


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    database: DataBase = Depends(get_database),
) -> UserInDB:
    """
    Resolves the requester from the X-User-Id header set by the upstream
    auth proxy. Replace via app.dependency_overrides for other schemes.
    """
    user_oid = parse_object_id(x_user_id)
    if user_oid is None:
        raise AuthenticationError()
    user = await database.users.find_one({"_id": user_oid})
    if not user:
        raise AuthenticationError()
    return UserInDB.model_validate(user)
