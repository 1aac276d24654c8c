"""User repository over the "user" collection."""

from typing import Any, Dict, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from database import USER_COLLECTION, create_document, get_db, guarded, to_object_id
from errors import DuplicateEmail, UserNotFound
from logger import get_logger
from schemas import User

logger = get_logger("users")


@guarded("create user")
def create(user: User) -> str:
    try:
        return create_document(USER_COLLECTION, user)
    except DuplicateKeyError as e:
        raise DuplicateEmail() from e


@guarded("get user")
def get_by_id(user_id: str) -> Dict[str, Any]:
    oid = to_object_id(user_id)
    doc = get_db()[USER_COLLECTION].find_one({"_id": oid}) if oid else None
    if not doc:
        raise UserNotFound()
    return doc


@guarded("find user")
def find_by_email(email: str) -> Optional[Dict[str, Any]]:
    return get_db()[USER_COLLECTION].find_one({"email": email.lower()})


def _update(user_id: str, update: Dict[str, Any]) -> Dict[str, Any]:
    oid = to_object_id(user_id)
    if oid is None:
        raise UserNotFound()
    doc = get_db()[USER_COLLECTION].find_one_and_update(
        {"_id": oid}, update, return_document=ReturnDocument.AFTER
    )
    if doc is None:
        raise UserNotFound()
    return doc


@guarded("update user")
def update_fields(user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``fields`` into the stored user and return the updated document."""
    try:
        return _update(user_id, {"$set": fields})
    except DuplicateKeyError as e:
        raise DuplicateEmail() from e


@guarded("add to list")
def add_to_list(user_id: str, list_name: str, article_id: str) -> Dict[str, Any]:
    return _update(user_id, {"$addToSet": {list_name: article_id}})


@guarded("remove from list")
def remove_from_list(user_id: str, list_name: str, article_id: str) -> Dict[str, Any]:
    return _update(user_id, {"$pull": {list_name: article_id}})
