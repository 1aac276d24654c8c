"""
Category and edition grouping over an already-fetched article list.

An edition is every article published on the same calendar day, keyed
``dd-MM-yyyy``. Grouping functions partition their input: each article lands
in exactly one group and input order is kept within a group.
"""

from collections import OrderedDict
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from errors import ValidationError
from schemas import ArticleOut

EDITION_FORMAT = "%d-%m-%Y"


def _day(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def edition_key(value: datetime) -> str:
    return _day(value).strftime(EDITION_FORMAT)


def parse_edition_key(key: str) -> date:
    try:
        return datetime.strptime(key, EDITION_FORMAT).date()
    except ValueError as e:
        raise ValidationError(f"Edition must be a date formatted dd-MM-yyyy, got {key!r}") from e


def categories(articles: Iterable[ArticleOut]) -> List[str]:
    """Distinct categories in first-seen order."""
    return list(OrderedDict.fromkeys(article.category for article in articles))


def filter_by_category(articles: Iterable[ArticleOut], category: Optional[str]) -> List[ArticleOut]:
    if not category:
        return list(articles)
    return [article for article in articles if article.category == category]


def group_by_category(articles: Iterable[ArticleOut]) -> Dict[str, List[ArticleOut]]:
    groups: Dict[str, List[ArticleOut]] = OrderedDict()
    for article in articles:
        groups.setdefault(article.category, []).append(article)
    return groups


def group_by_edition(articles: Iterable[ArticleOut]) -> Dict[str, List[ArticleOut]]:
    groups: Dict[str, List[ArticleOut]] = OrderedDict()
    for article in articles:
        groups.setdefault(edition_key(article.date), []).append(article)
    return groups


def filter_by_edition(articles: Iterable[ArticleOut], key: str) -> List[ArticleOut]:
    day = parse_edition_key(key)
    return [article for article in articles if _day(article.date) == day]


def same_edition(articles: Sequence[ArticleOut], reference: ArticleOut) -> List[ArticleOut]:
    """Articles published on the same calendar day as ``reference`` (itself included)."""
    return filter_by_edition(articles, edition_key(reference.date))
