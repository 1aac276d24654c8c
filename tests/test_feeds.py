"""Tests for category and edition grouping."""
from datetime import datetime, timedelta, timezone

import pytest

import feeds
from errors import ValidationError
from schemas import ArticleOut


def make_article(article_id, category, when):
    return ArticleOut(
        id=article_id,
        title=f"Article {article_id}",
        category=category,
        excerpt="E",
        content="body",
        image=["http://img"],
        date=when,
    )


@pytest.fixture
def sample():
    day = datetime(2025, 1, 11, 9, 30, tzinfo=timezone.utc)
    return [
        make_article("a1", "Tech", day),
        make_article("a2", "Culture", day + timedelta(hours=10)),
        make_article("a3", "Tech", day + timedelta(days=1)),
        make_article("a4", "Design", day - timedelta(days=7)),
        make_article("a5", "Culture", day + timedelta(days=1, hours=2)),
    ]


def test_categories_first_seen_order(sample):
    assert feeds.categories(sample) == ["Tech", "Culture", "Design"]


def test_group_by_category_is_a_partition(sample):
    groups = feeds.group_by_category(sample)

    assert {k: [a.id for a in v] for k, v in groups.items()} == {
        "Tech": ["a1", "a3"],
        "Culture": ["a2", "a5"],
        "Design": ["a4"],
    }
    flattened = [a.id for group in groups.values() for a in group]
    assert sorted(flattened) == sorted(a.id for a in sample)


def test_filter_by_category(sample):
    assert [a.id for a in feeds.filter_by_category(sample, "Culture")] == ["a2", "a5"]
    assert feeds.filter_by_category(sample, None) == sample
    assert feeds.filter_by_category(sample, "Sports") == []


def test_edition_key_uses_utc_day():
    late_evening_west = datetime(2025, 1, 11, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert feeds.edition_key(late_evening_west) == "12-01-2025"
    assert feeds.edition_key(datetime(2025, 1, 11, 23, 59)) == "11-01-2025"


def test_group_by_edition(sample):
    groups = feeds.group_by_edition(sample)

    assert list(groups) == ["11-01-2025", "12-01-2025", "04-01-2025"]
    assert [a.id for a in groups["11-01-2025"]] == ["a1", "a2"]
    assert sum(len(v) for v in groups.values()) == len(sample)


def test_same_edition(sample):
    reference = sample[2]
    assert [a.id for a in feeds.same_edition(sample, reference)] == ["a3", "a5"]


def test_filter_by_edition(sample):
    assert [a.id for a in feeds.filter_by_edition(sample, "04-01-2025")] == ["a4"]
    assert feeds.filter_by_edition(sample, "01-01-2030") == []


@pytest.mark.parametrize("key", ["2025-01-11", "32-01-2025", "yesterday"])
def test_bad_edition_key(sample, key):
    with pytest.raises(ValidationError):
        feeds.filter_by_edition(sample, key)
