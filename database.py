"""
MongoDB access for the magazine backend.

Each Pydantic model in ``schemas`` maps to a collection named after the
lowercased model name:
- Article -> "article" collection
- User -> "user" collection

Repositories go through ``get_db()`` so tests can swap ``db`` for an
in-memory database.
"""

from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import get_settings
from errors import PersistenceError
from logger import get_logger

logger = get_logger("database")

ARTICLE_COLLECTION = "article"
USER_COLLECTION = "user"

settings = get_settings()

client = MongoClient(
    settings.database.database_url,
    serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
    connect=False,
)
db = client[settings.database.database_name]


def get_db():
    return db


def guarded(operation: str) -> Callable:
    """Report store failures from ``operation`` as PersistenceError.

    DuplicateKeyError passes through untouched; callers map it to a domain
    conflict.
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DuplicateKeyError:
                raise
            except PyMongoError as e:
                logger.error(f"Store failure during {operation}: {e}")
                raise PersistenceError() from e

        return wrapper

    return decorator


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an opaque string id; None when it cannot name a document."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value.strip())
    except InvalidId:
        return None


def normalize_id(value: Any) -> str:
    """Canonical string form of an id, so list membership compares equal."""
    oid = to_object_id(value)
    if oid is not None:
        return str(oid)
    return str(value).strip()


def serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Replace Mongo's ``_id`` with a string ``id``."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


@guarded("insert")
def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    """Insert one document and return its generated id as a string."""
    if isinstance(data, BaseModel):
        doc = data.model_dump(by_alias=True)
    else:
        doc = dict(data)
    doc.setdefault("created_at", datetime.now(timezone.utc))
    result = get_db()[collection_name].insert_one(doc)
    return str(result.inserted_id)


@guarded("find")
def get_documents(
    collection_name: str, filter_dict: Optional[Dict[str, Any]] = None, limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    cursor = get_db()[collection_name].find(filter_dict or {})
    if limit:
        cursor = cursor.limit(limit)
    return [serialize(doc) for doc in cursor]


@guarded("create_index")
def ensure_indexes() -> None:
    """Create the indexes the repositories rely on."""
    get_db()[USER_COLLECTION].create_index([("email", ASCENDING)], unique=True)
    get_db()[ARTICLE_COLLECTION].create_index([("category", ASCENDING)])
    logger.info("Database indexes ensured")


def describe() -> Dict[str, Any]:
    """Database diagnostics for the /test endpoint."""
    response = {
        "database": "❌ Not Available",
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": [],
    }
    try:
        database = get_db()
        response["database"] = "✅ Available"
        response["database_name"] = database.name
        collections = database.list_collection_names()
        response["collections"] = collections[:10]
        response["connection_status"] = "Connected"
        response["database"] = "✅ Connected & Working"
    except PyMongoError as e:
        response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"
    return response
