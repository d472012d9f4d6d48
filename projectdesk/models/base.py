from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any

from bson import ObjectId
from pydantic import ConfigDict, GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.alias_generators import to_camel
from pydantic_core import core_schema


def _coerce_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError("Invalid ObjectId")


class PyObjectId(ObjectId):
    """ObjectId field type: accepts an ObjectId or its hex string, emits the hex string."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: type[Any], handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        as_object_id = core_schema.no_info_plain_validator_function(_coerce_object_id)
        return core_schema.json_or_python_schema(
            python_schema=as_object_id,
            # JSON input must be a string before it can become an ObjectId
            json_schema=core_schema.chain_schema([core_schema.str_schema(), as_object_id]),
            serialization=core_schema.to_string_ser_schema(when_used="always"),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, _core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> dict[str, Any]:
        return {"type": "string", "format": "objectid", "pattern": "^[0-9a-f]{24}$"}


# Documents are stored and served with camelCase keys (startDate, createdBy, ...)
common_config = ConfigDict(
    populate_by_name=True,
    arbitrary_types_allowed=True,
    alias_generator=to_camel,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def date_to_datetime(value: date) -> datetime:
    """BSON has no date type; calendar dates are stored as midnight UTC."""
    return datetime.combine(value, time.min, tzinfo=timezone.utc)
