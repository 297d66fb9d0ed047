"""
MongoDB access for the Fare Compare API.

`db` is None when DATABASE_URL / DATABASE_NAME are not configured; callers
must check for that and report the store as unavailable.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from config import settings

logger = logging.getLogger(__name__)

USER_COLLECTION = "user"

_client: Optional[MongoClient] = None
db: Optional[Database] = None

if settings.DATABASE_URL and settings.DATABASE_NAME:
    _client = MongoClient(settings.DATABASE_URL)
    db = _client[settings.DATABASE_NAME]


def get_db() -> Optional[Database]:
    """FastAPI dependency returning the configured database handle."""
    return db


def ensure_indexes(database: Database) -> None:
    """Create the unique indexes that back email / phone uniqueness."""
    users = database[USER_COLLECTION]
    users.create_index([("email", ASCENDING)], unique=True, name="email_unique")
    users.create_index([("phone", ASCENDING)], unique=True, name="phone_unique")
    logger.info("Ensured unique indexes on %s.email and %s.phone", USER_COLLECTION, USER_COLLECTION)


def create_document(database: Database, collection_name: str, data: BaseModel) -> str:
    """Insert a document with created_at / updated_at stamps and return its id."""
    data_dict = data.model_dump()

    now = datetime.now(timezone.utc)
    data_dict["created_at"] = now
    data_dict["updated_at"] = now

    result = database[collection_name].insert_one(data_dict)
    return str(result.inserted_id)

