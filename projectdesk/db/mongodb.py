import logging
from urllib.parse import urlparse

import motor.motor_asyncio
from fastapi import Request
from pymongo import ASCENDING, DESCENDING

from ..core.config import Settings

logger = logging.getLogger(__name__)

PROJECTS_COLLECTION = "projects"
USERS_COLLECTION = "users"


class DataBase:
    """Explicit store handle: one Motor client and the database it serves."""

    def __init__(
        self,
        client: motor.motor_asyncio.AsyncIOMotorClient | None = None,
        db: motor.motor_asyncio.AsyncIOMotorDatabase | None = None,
    ):
        self.client = client
        self.db = db

    @property
    def projects(self):
        return self.db[PROJECTS_COLLECTION]

    @property
    def users(self):
        return self.db[USERS_COLLECTION]


def resolve_database_name(connection_string: str, default: str) -> str:
    db_name = urlparse(connection_string).path.lstrip('/')
    if not db_name:
        logger.info(f"No database name found in MONGODB_URL path, using default: {default}")
        return default
    return db_name


def mongo_host(connection_string: str) -> str:
    """Host part of a Mongo URL, with any credentials stripped."""
    return connection_string.split('@')[-1].split('/')[0]


async def ensure_indexes(database: DataBase) -> None:
    await database.users.create_index([("email", ASCENDING)], unique=True)
    await database.projects.create_index([("createdBy", ASCENDING), ("createdAt", DESCENDING)])


async def connect_to_mongo(settings: Settings) -> DataBase:
    """Connects to MongoDB using the URL from settings and returns the handle."""
    connection_string = str(settings.MONGODB_URL)
    logger.info(f"Connecting to MongoDB host {mongo_host(connection_string)}...")
    client = motor.motor_asyncio.AsyncIOMotorClient(
        connection_string,
        serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
    )
    db_name = resolve_database_name(connection_string, settings.MONGODB_DB_NAME)
    database = DataBase(client=client, db=client[db_name])
    try:
        await client.admin.command('ping')
        await ensure_indexes(database)
    except Exception as e:
        logger.error(f"Error connecting to MongoDB: {e}")
        client.close()
        raise
    logger.info(f"Successfully connected to MongoDB database: {db_name}")
    return database


async def close_mongo_connection(database: DataBase | None) -> None:
    """Closes the MongoDB connection."""
    if database is not None and database.client is not None:
        database.client.close()
        database.client = None
        database.db = None
        logger.info("MongoDB connection closed.")


def get_database(request: Request) -> DataBase:
    database = getattr(request.app.state, "database", None)
    if database is None or database.db is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo first.")
    return database
