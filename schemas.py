"""
Database Schemas

MongoDB collection schemas as Pydantic models, plus the request/response
payloads built on them. Stored documents and JSON payloads use camelCase keys
(``readTime``, ``memberSince``, ``likedArticles``); Python code uses the
snake_case attribute names.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

LIKED_ARTICLES = "likedArticles"
SAVED_ARTICLES = "savedArticles"
INTERACTION_LISTS = (LIKED_ARTICLES, SAVED_ARTICLES)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Article(CamelModel):
    """
    Articles collection schema
    Collection name: "article"
    """
    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    image: List[str] = Field(..., min_length=1, description="URLs of already-uploaded media")
    read_time: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("readTime", "readtime", "read_time"),
        serialization_alias="readTime",
    )
    date: Optional[datetime] = Field(None, validate_default=True)
    author: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("image", mode="before")
    @classmethod
    def wrap_single_image(cls, v):
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("image")
    @classmethod
    def reject_blank_images(cls, v):
        if any(not url for url in v):
            raise ValueError("image URLs must not be empty")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def default_date(cls, v):
        return _utcnow() if v in (None, "") else v

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        """Accept a comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


class ArticleOut(Article):
    id: str

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ArticleOut":
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id", doc.get("id")))
        return cls.model_validate(doc)


class User(CamelModel):
    """
    Users collection schema
    Collection name: "user"
    """
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., description="BCrypt password hash")
    member_since: datetime = Field(default_factory=_utcnow)
    avatar_url: Optional[str] = None
    liked_articles: List[str] = Field(default_factory=list)
    saved_articles: List[str] = Field(default_factory=list)


class PublicUser(CamelModel):
    """User as returned to clients; the password hash is never included."""

    id: str
    name: str
    email: EmailStr
    member_since: Optional[datetime] = None
    avatar_url: Optional[str] = None
    liked_articles: List[str] = Field(default_factory=list)
    saved_articles: List[str] = Field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "PublicUser":
        return cls(
            id=str(doc.get("_id", doc.get("id"))),
            name=doc.get("name"),
            email=doc.get("email"),
            member_since=doc.get("memberSince"),
            avatar_url=doc.get("avatarUrl"),
            liked_articles=[str(item) for item in doc.get(LIKED_ARTICLES, [])],
            saved_articles=[str(item) for item in doc.get(SAVED_ARTICLES, [])],
        )


# Request payloads

class CredentialsModel(BaseModel):
    """Payloads carrying passwords; whitespace in a password is significant."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CredentialsModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(CredentialsModel):
    # Plain string: a malformed address fails the lookup like an unknown one.
    email: Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1)]
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(CredentialsModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class ProfileUpdate(CamelModel):
    """Fields a user may change through the profile endpoint."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    avatar_url: Optional[str] = None


class UserRequest(CamelModel):
    user_id: str = Field(..., min_length=1, validation_alias=AliasChoices("userId", "id", "user_id"))


class InteractionRequest(UserRequest):
    article_id: str = Field(..., min_length=1, validation_alias=AliasChoices("articleId", "article_id"))


# Response payloads

class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: PublicUser


class LikedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    liked_articles: List[str] = Field(..., alias=LIKED_ARTICLES)


class SavedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    saved_articles: List[str] = Field(..., alias=SAVED_ARTICLES)


class ArticleListResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: List[ArticleOut]
