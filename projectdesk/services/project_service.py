import logging
from typing import Iterable, List, Optional

from bson import ObjectId
from pydantic import ValidationError
from pymongo import DESCENDING, ReturnDocument

from projectdesk.core.errors import NotFoundError, ValidationFailedError, format_validation_message
from projectdesk.db.mongodb import DataBase
from projectdesk.models.base import date_to_datetime, utcnow
from projectdesk.models.project import (
    PROTECTED_FIELDS,
    ProjectCreate,
    ProjectOut,
    ProjectStatus,
    ProjectUpdate,
    TeamRole,
)
from projectdesk.services.user_service import UserService
from projectdesk.utils.dependencies import parse_object_id

logger = logging.getLogger(__name__)

PROJECT_NOT_FOUND = "Project not found"
DATE_FIELDS = ("startDate", "endDate")


def merge_team_members(team: List[dict], candidate_ids: Iterable[ObjectId], creator_id: ObjectId) -> List[dict]:
    """
    Appends each candidate to `team` as a member unless it is the creator or
    already on the team. Membership is checked against a set of user ids built
    once from the existing team, so repeated candidates are added only once.
    """
    seen = {member["user"] for member in team}
    seen.add(creator_id)
    merged = list(team)
    for user_id in candidate_ids:
        if user_id in seen:
            continue
        seen.add(user_id)
        merged.append({"user": user_id, "role": TeamRole.MEMBER.value})
    return merged


def _validate(model, data: dict):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationFailedError(format_validation_message("Project", e))


def _to_storage(values: dict) -> dict:
    """Converts validated model output into BSON-encodable values."""
    stored = {}
    for key, value in values.items():
        if key in DATE_FIELDS:
            value = date_to_datetime(value)
        elif isinstance(value, ProjectStatus):
            value = value.value
        stored[key] = value
    return stored


class ProjectService:
    """Owner-scoped operations over the projects collection."""

    def __init__(self, database: DataBase):
        self.collection = database.projects
        self.users = UserService(database)

    async def _expand(self, documents: List[dict], expand_team: bool) -> List[ProjectOut]:
        """Replaces createdBy (and optionally team[].user) with user summaries."""
        ids = set()
        for doc in documents:
            ids.add(doc.get("createdBy"))
            if expand_team:
                ids.update(member.get("user") for member in doc.get("team", []))
        summaries = await self.users.summaries(ids)

        expanded = []
        for doc in documents:
            doc = dict(doc)
            doc["createdBy"] = summaries.get(doc.get("createdBy"))
            if expand_team:
                doc["team"] = [
                    {"user": summaries.get(member.get("user")), "role": member["role"]}
                    for member in doc.get("team", [])
                ]
            expanded.append(ProjectOut.model_validate(doc))
        return expanded

    async def _expand_one(self, document: dict, expand_team: bool = True) -> ProjectOut:
        return (await self._expand([document], expand_team))[0]

    def _owned(self, project_id, owner_id: ObjectId) -> Optional[dict]:
        """Query for a project that exists and belongs to owner, or None for a malformed id."""
        oid = parse_object_id(project_id)
        if oid is None:
            return None
        return {"_id": oid, "createdBy": owner_id}

    async def list_projects(self, owner_id: ObjectId) -> List[ProjectOut]:
        cursor = self.collection.find({"createdBy": owner_id}).sort("createdAt", DESCENDING)
        projects = await cursor.to_list(length=None)
        return await self._expand(projects, expand_team=False)

    async def get_project(self, project_id, owner_id: ObjectId) -> ProjectOut:
        query = self._owned(project_id, owner_id)
        project = await self.collection.find_one(query) if query else None
        if not project:
            raise NotFoundError(PROJECT_NOT_FOUND)
        return await self._expand_one(project, expand_team=False)

    async def create_project(self, data: dict, owner_id: ObjectId) -> ProjectOut:
        payload = _validate(ProjectCreate, data)
        values = payload.model_dump(by_alias=True, exclude={"team_members_by_email"})
        now = utcnow()
        document = _to_storage(values)
        document.update({
            "status": ProjectStatus.ACTIVE.value,
            "createdBy": owner_id,
            "team": [{"user": owner_id, "role": TeamRole.ADMIN.value}],
            "createdAt": now,
            "updatedAt": now,
        })

        if payload.team_members_by_email:
            users = await self.users.find_by_emails(payload.team_members_by_email)
            document["team"] = merge_team_members(
                document["team"], [u["_id"] for u in users], owner_id
            )

        result = await self.collection.insert_one(document)
        logger.info(f"Created project {result.inserted_id} with {len(document['team'])} team member(s)")
        created = await self.collection.find_one({"_id": result.inserted_id})
        return await self._expand_one(created)

    async def update_project(self, project_id, data: dict, owner_id: ObjectId) -> ProjectOut:
        query = self._owned(project_id, owner_id)
        existing = await self.collection.find_one(query) if query else None
        if not existing:
            raise NotFoundError(PROJECT_NOT_FOUND)

        # Team membership is not editable here; a supplied team is silently dropped
        update_data = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
        payload = _validate(ProjectUpdate, update_data)
        changes = _to_storage(payload.model_dump(by_alias=True, exclude_unset=True))
        if not changes:
            return await self._expand_one(existing)

        changes["updatedAt"] = utcnow()
        updated = await self.collection.find_one_and_update(
            query,
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            # Deleted between the ownership check and the write
            raise NotFoundError(PROJECT_NOT_FOUND)
        return await self._expand_one(updated)

    async def delete_project(self, project_id, owner_id: ObjectId) -> None:
        query = self._owned(project_id, owner_id)
        if query is None:
            raise NotFoundError(PROJECT_NOT_FOUND)
        result = await self.collection.delete_one(query)
        if result.deleted_count == 0:
            raise NotFoundError(PROJECT_NOT_FOUND)
        logger.info(f"Deleted project {query['_id']}")
