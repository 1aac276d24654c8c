"""Article repository over the "article" collection."""

from typing import Any, Dict, Iterable, List, Optional

import pydantic

from database import ARTICLE_COLLECTION, create_document, get_db, get_documents, guarded, to_object_id
from errors import ArticleNotFound, ValidationError, format_validation_errors
from logger import get_logger
from schemas import Article, ArticleOut

logger = get_logger("articles")


def create(fields: Dict[str, Any]) -> ArticleOut:
    """Validate and persist a new article; nothing is written if validation fails."""
    if not isinstance(fields, dict):
        raise ValidationError("Article body must be a JSON object")
    try:
        article = Article.model_validate(fields)
    except pydantic.ValidationError as e:
        raise ValidationError(format_validation_errors(e.errors())) from e

    doc = article.model_dump(by_alias=True)
    article_id = create_document(ARTICLE_COLLECTION, doc)
    logger.info(f"Created article {article_id} in category {article.category!r}")
    return ArticleOut(id=article_id, **article.model_dump())


def list_articles(category: Optional[str] = None) -> List[ArticleOut]:
    """All articles, in no particular order."""
    query = {"category": category} if category else {}
    return [ArticleOut.from_document(doc) for doc in get_documents(ARTICLE_COLLECTION, query)]


@guarded("get article")
def get_by_id(article_id: str) -> ArticleOut:
    oid = to_object_id(article_id)
    doc = get_db()[ARTICLE_COLLECTION].find_one({"_id": oid}) if oid else None
    if not doc:
        raise ArticleNotFound()
    return ArticleOut.from_document(doc)


@guarded("check article")
def exists(article_id: str) -> bool:
    oid = to_object_id(article_id)
    if oid is None:
        return False
    return get_db()[ARTICLE_COLLECTION].find_one({"_id": oid}, {"_id": 1}) is not None


@guarded("get articles")
def get_many(article_ids: Iterable[str]) -> List[ArticleOut]:
    """Resolve ids in the given order, skipping ids that no longer resolve."""
    oids = [oid for oid in (to_object_id(item) for item in article_ids) if oid is not None]
    if not oids:
        return []
    found = {
        doc["_id"]: ArticleOut.from_document(doc)
        for doc in get_db()[ARTICLE_COLLECTION].find({"_id": {"$in": oids}})
    }
    return [found[oid] for oid in oids if oid in found]
