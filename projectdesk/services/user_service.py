import logging
from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from projectdesk.core.errors import DuplicateEmailError
from projectdesk.db.mongodb import DataBase
from projectdesk.models.base import utcnow
from projectdesk.models.users import UserCreate, UserInDB, UserSummary

logger = logging.getLogger(__name__)

# Fields exposed when a user reference is expanded inside a project
SUMMARY_PROJECTION = {"name": 1, "email": 1}


class UserService:
    def __init__(self, database: DataBase):
        self.collection = database.users

    async def create_user(self, user: UserCreate) -> UserInDB:
        user_dict = user.model_dump()
        user_dict["createdAt"] = utcnow()
        try:
            result = await self.collection.insert_one(user_dict)
        except DuplicateKeyError:
            raise DuplicateEmailError()
        logger.info(f"Created user {result.inserted_id}")
        created = await self.collection.find_one({"_id": result.inserted_id})
        return UserInDB.model_validate(created)

    async def get_user(self, user_id: ObjectId) -> Optional[UserInDB]:
        user = await self.collection.find_one({"_id": user_id})
        if user:
            return UserInDB.model_validate(user)
        return None

    async def find_by_emails(self, emails: Iterable[str]) -> List[dict]:
        """Users whose email exactly matches one of `emails`."""
        emails = list(dict.fromkeys(emails))
        if not emails:
            return []
        cursor = self.collection.find({"email": {"$in": emails}}, {"_id": 1, "email": 1})
        return await cursor.to_list(length=None)

    async def summaries(self, user_ids: Iterable[ObjectId]) -> Dict[ObjectId, UserSummary]:
        """Maps each existing id to its {_id, name, email} summary; unknown ids are absent."""
        ids = list({uid for uid in user_ids if uid is not None})
        if not ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": ids}}, SUMMARY_PROJECTION)
        users = await cursor.to_list(length=None)
        return {u["_id"]: UserSummary.model_validate(u) for u in users}
