"""
Liked/saved article membership for a user.

Both lists hold article ids with set semantics. Every mutation is a single
``$addToSet`` or ``$pull`` on the user document, so concurrent writers can
never leave a duplicate entry behind, and the result returned to the caller
is read from the document the store hands back after the write.
"""

from typing import List

import articles
import users
from database import normalize_id
from errors import ArticleNotFound, ValidationError
from logger import get_logger
from schemas import INTERACTION_LISTS, ArticleOut

logger = get_logger("interactions")


def _check_list_name(list_name: str) -> None:
    if list_name not in INTERACTION_LISTS:
        raise ValidationError(f"Unknown list {list_name!r}; expected one of {', '.join(INTERACTION_LISTS)}")


def _members(doc, list_name: str) -> List[str]:
    return [str(item) for item in doc.get(list_name, [])]


def _add(user_id: str, article_id: str, list_name: str) -> List[str]:
    if not articles.exists(article_id):
        raise ArticleNotFound()
    doc = users.add_to_list(user_id, list_name, article_id)
    logger.info(f"Added article {article_id} to {list_name} of user {user_id}")
    return _members(doc, list_name)


def _remove(user_id: str, article_id: str, list_name: str) -> List[str]:
    # The article may have been deleted since; removal must still go through.
    doc = users.remove_from_list(user_id, list_name, article_id)
    logger.info(f"Removed article {article_id} from {list_name} of user {user_id}")
    return _members(doc, list_name)


def toggle(user_id: str, article_id: str, list_name: str) -> List[str]:
    """Add the article if absent from the list, remove it if present.

    Returns the list contents after the write has been persisted.
    """
    _check_list_name(list_name)
    article_id = normalize_id(article_id)
    user = users.get_by_id(user_id)
    if article_id in _members(user, list_name):
        return _remove(user_id, article_id, list_name)
    return _add(user_id, article_id, list_name)


def set_membership(user_id: str, article_id: str, list_name: str, desired: bool) -> List[str]:
    """Force the article in (``desired=True``) or out of the list; idempotent."""
    _check_list_name(list_name)
    article_id = normalize_id(article_id)
    users.get_by_id(user_id)
    if desired:
        return _add(user_id, article_id, list_name)
    return _remove(user_id, article_id, list_name)


def list_articles(user_id: str, list_name: str) -> List[ArticleOut]:
    """The user's liked or saved articles as full records, in list order."""
    _check_list_name(list_name)
    user = users.get_by_id(user_id)
    return articles.get_many(_members(user, list_name))
