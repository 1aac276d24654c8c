"""
Auth service: registration, login, password change and profile edits.

There is no server-side session; a successful login hands the public user
record back to the client, which holds on to it.
"""

from typing import Any, Dict

import pydantic
from passlib.context import CryptContext

import users
from config import get_settings
from database import to_object_id
from errors import (
    DuplicateEmail,
    InvalidCredentials,
    UserNotFound,
    ValidationError,
    format_validation_errors,
)
from logger import get_logger
from schemas import INTERACTION_LISTS, ProfileUpdate, PublicUser, User

logger = get_logger("auth")

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().security.bcrypt_rounds,
)

# Owned by the interaction service or by change_password.
PROTECTED_PROFILE_FIELDS = frozenset(INTERACTION_LISTS) | {
    "liked_articles",
    "saved_articles",
    "password",
    "memberSince",
    "member_since",
    "id",
    "_id",
}


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(plain_password, password_hash)


def register(name: str, email: str, password: str) -> PublicUser:
    email = email.lower()
    if users.find_by_email(email):
        raise DuplicateEmail()

    user = User(name=name, email=email, password=get_password_hash(password))
    user_id = users.create(user)
    logger.info(f"Registered user {user_id}")
    return PublicUser(id=user_id, **user.model_dump(exclude={"password"}))


def login(email: str, password: str) -> PublicUser:
    doc = users.find_by_email(email)
    if not doc:
        raise UserNotFound("No account is registered with that email")
    if not verify_password(password, doc.get("password", "")):
        logger.info(f"Rejected login for user {doc['_id']}")
        raise InvalidCredentials()
    return PublicUser.from_document(doc)


def change_password(user_id: str, current_password: str, new_password: str) -> None:
    if not new_password:
        raise ValidationError("New password must not be empty")
    doc = users.get_by_id(user_id)
    if not verify_password(current_password, doc.get("password", "")):
        raise InvalidCredentials("Current password is incorrect")
    users.update_fields(user_id, {"password": get_password_hash(new_password)})
    logger.info(f"Changed password for user {user_id}")


def get_profile(user_id: str) -> PublicUser:
    return PublicUser.from_document(users.get_by_id(user_id))


def update_profile(user_id: str, fields: Dict[str, Any]) -> PublicUser:
    """Merge profile fields into the user record.

    Liked/saved lists, the password and identity fields cannot be written
    here; a request naming any of them is rejected before anything is stored.
    """
    if not isinstance(fields, dict):
        raise ValidationError("Profile update must be a JSON object")
    protected = sorted(PROTECTED_PROFILE_FIELDS.intersection(fields))
    if protected:
        raise ValidationError(f"Fields cannot be changed through a profile update: {', '.join(protected)}")

    try:
        update = ProfileUpdate.model_validate(fields)
    except pydantic.ValidationError as e:
        raise ValidationError(format_validation_errors(e.errors())) from e

    changes = update.model_dump(by_alias=True, exclude_unset=True)
    # name and email can be changed but not cleared
    changes = {key: value for key, value in changes.items() if value is not None or key == "avatarUrl"}
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        owner = users.find_by_email(changes["email"])
        if owner and owner["_id"] != to_object_id(user_id):
            raise DuplicateEmail()

    if not changes:
        return get_profile(user_id)

    doc = users.update_fields(user_id, changes)
    logger.info(f"Updated profile fields {sorted(changes)} for user {user_id}")
    return PublicUser.from_document(doc)
