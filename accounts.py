"""Account registration, login and search history."""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from bson import ObjectId
from passlib.context import CryptContext
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from config import settings
from database import USER_COLLECTION, create_document
from errors import AuthError, ConflictError, NotFoundError, ValidationError
from schemas import (
    Location,
    ProfileResponse,
    PublicProfile,
    RegisterRequest,
    SearchRecord,
    User,
)

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def hash_password(p: str) -> str:
    return pwd_context.hash(p)


def verify_password(p: str, hashed: str) -> bool:
    return pwd_context.verify(p, hashed)


def public_profile(doc: dict) -> PublicProfile:
    return PublicProfile(first_name=doc["first_name"], last_name=doc["last_name"], email=doc["email"])


def _object_id(user_id: str) -> ObjectId:
    if not ObjectId.is_valid(user_id):
        raise NotFoundError("User not found")
    return ObjectId(user_id)


def register_user(database: Database, payload: RegisterRequest) -> Tuple[str, PublicProfile]:
    """
    Store a new account with an empty search history.

    Uniqueness of email and phone is enforced only by the collection's unique
    indexes; a duplicate key on insert is reported as ConflictError.
    """
    first_name = payload.first_name.strip()
    last_name = payload.last_name.strip()
    if not first_name or not last_name:
        raise ValidationError("First and last name are required")

    user = User(
        first_name=first_name,
        last_name=last_name,
        email=str(payload.email).strip().lower(),
        phone=payload.phone,
        password_hash=hash_password(payload.password),
    )
    try:
        user_id = create_document(database, USER_COLLECTION, user)
    except DuplicateKeyError as e:
        logger.info("Registration rejected, email or phone already registered")
        raise ConflictError("User already exists") from e

    logger.info("Registered user %s", user_id)
    return user_id, PublicProfile(first_name=user.first_name, last_name=user.last_name, email=user.email)


def authenticate_user(database: Database, email: str, password: str) -> Tuple[str, PublicProfile]:
    doc = database[USER_COLLECTION].find_one({"email": email.strip().lower()})
    if not doc:
        raise NotFoundError("User not found")
    if not verify_password(password, doc.get("password_hash", "")):
        logger.info("Failed login for user %s", doc["_id"])
        raise AuthError("Authentication failed")
    return str(doc["_id"]), public_profile(doc)


def append_search_record(
    database: Database,
    user_id: Optional[str],
    pickup_location: Location,
    dropoff_location: Location,
    selected_ride: str,
    fare_amount: float,
) -> List[SearchRecord]:
    """Append one record to the user's history and return the whole history."""
    if not user_id:
        raise ValidationError("User ID is required")

    record = SearchRecord(
        pickup_location=pickup_location,
        dropoff_location=dropoff_location,
        selected_ride=selected_ride,
        fare_amount=fare_amount,
        timestamp=datetime.now(timezone.utc),
    )
    # upsert stays off: an unknown id must never create an account
    doc = database[USER_COLLECTION].find_one_and_update(
        {"_id": _object_id(user_id)},
        {
            "$push": {"search_history": record.model_dump()},
            "$set": {"updated_at": record.timestamp},
        },
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise NotFoundError("User not found")

    logger.info("Saved %s search for user %s", selected_ride, user_id)
    return [SearchRecord.model_validate(r) for r in doc.get("search_history", [])]


def get_user_profile(database: Database, user_id: str) -> ProfileResponse:
    doc = database[USER_COLLECTION].find_one({"_id": _object_id(user_id)})
    if not doc:
        raise NotFoundError("User not found")
    return ProfileResponse(
        user_id=str(doc["_id"]),
        first_name=doc["first_name"],
        last_name=doc["last_name"],
        email=doc["email"],
        phone=doc["phone"],
        created_at=doc.get("created_at"),
        search_history=[SearchRecord.model_validate(r) for r in doc.get("search_history", [])],
    )
