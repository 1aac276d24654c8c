"""Tests for the article repository."""
from datetime import datetime

import pytest

import articles
from database import ARTICLE_COLLECTION
from errors import ArticleNotFound, ValidationError


def test_create_assigns_id_and_keeps_fields(mongo_db, article_fields):
    article = articles.create(article_fields)

    assert article.id
    assert article.title == "T"
    assert article.read_time == "5 min"
    assert article.image == ["http://img"]
    assert isinstance(article.date, datetime)
    assert mongo_db[ARTICLE_COLLECTION].count_documents({}) == 1


def test_create_stores_camel_case_document(mongo_db, article):
    doc = mongo_db[ARTICLE_COLLECTION].find_one()
    assert doc["readTime"] == "5 min"
    assert "read_time" not in doc


def test_create_missing_fields_persists_nothing(mongo_db):
    with pytest.raises(ValidationError) as exc_info:
        articles.create({"title": "x"})

    message = exc_info.value.message
    assert "Missing required fields" in message
    for field in ("category", "excerpt", "content", "image"):
        assert field in message
    assert mongo_db[ARTICLE_COLLECTION].count_documents({}) == 0


def test_create_rejects_empty_image_list(mongo_db, article_fields):
    article_fields["image"] = []
    with pytest.raises(ValidationError):
        articles.create(article_fields)


def test_create_rejects_blank_title(mongo_db, article_fields):
    article_fields["title"] = "   "
    with pytest.raises(ValidationError):
        articles.create(article_fields)


def test_create_rejects_non_object_body(mongo_db):
    with pytest.raises(ValidationError):
        articles.create(["not", "a", "dict"])


def test_single_image_and_tag_string_are_normalized(mongo_db, article_fields):
    article_fields["image"] = "http://img/one.png"
    article_fields["tags"] = "tech, culture ,, design"

    article = articles.create(article_fields)

    assert article.image == ["http://img/one.png"]
    assert article.tags == ["tech", "culture", "design"]


def test_supplied_date_is_kept(mongo_db, article_fields):
    article_fields["date"] = "2025-01-11T00:00:00Z"
    article = articles.create(article_fields)
    assert article.date.date().isoformat() == "2025-01-11"


def test_get_by_id_round_trip(mongo_db, article):
    fetched = articles.get_by_id(article.id)
    assert fetched.id == article.id
    assert fetched.title == article.title


@pytest.mark.parametrize("article_id", ["not-an-id", "0123456789abcdef01234567"])
def test_get_by_id_unknown_raises(mongo_db, article_id):
    with pytest.raises(ArticleNotFound):
        articles.get_by_id(article_id)


def test_list_and_category_filter(mongo_db, article_fields):
    articles.create(article_fields)
    articles.create({**article_fields, "category": "Culture"})

    assert len(articles.list_articles()) == 2
    culture = articles.list_articles("Culture")
    assert [a.category for a in culture] == ["Culture"]


def test_get_many_keeps_order_and_skips_missing(mongo_db, article_fields):
    first = articles.create(article_fields)
    second = articles.create({**article_fields, "title": "Second"})

    result = articles.get_many([second.id, "0123456789abcdef01234567", first.id, "junk"])

    assert [a.id for a in result] == [second.id, first.id]


def test_exists(mongo_db, article):
    assert articles.exists(article.id)
    assert not articles.exists("0123456789abcdef01234567")
    assert not articles.exists("junk")
