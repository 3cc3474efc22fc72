"""Tests for data models."""

import pytest
from pathlib import Path

from subtitle_review.models import (
    Article,
    ArticleContent,
    FileNode,
    ReviewState,
    Severity,
    TypoCorrection,
    ValidationIssue,
)


class TestArticleContent:

    def test_creation(self):
        entry = ArticleContent("00:00:01", "Hello world")
        assert entry.timestample == "00:00:01"
        assert entry.text == "Hello world"
        assert entry.important is None
        assert not entry.is_important

    def test_ids_are_unique_and_ignored_in_equality(self):
        a = ArticleContent("00:00:01", "Hello")
        b = ArticleContent("00:00:01", "Hello")
        assert a.id != b.id
        assert a == b

    def test_is_blank(self):
        assert ArticleContent("00:00:01", "  \n\t").is_blank
        assert not ArticleContent("00:00:01", " x ").is_blank

    def test_copy(self):
        entry = ArticleContent("00:00:01", "Hello")
        copied = entry.copy(text="World")

        # Original unchanged
        assert entry.text == "Hello"

        assert copied.text == "World"
        assert copied.timestample == entry.timestample
        assert copied.id == entry.id


class TestArticle:

    def test_copy_is_independent(self):
        article = Article(authors=["Ada"], content=[ArticleContent("00:00:01", "Hi")])
        copied = article.copy()

        copied.authors.append("Bob")
        copied.content[0].text = "Changed"

        assert article.authors == ["Ada"]
        assert article.content[0].text == "Hi"
        assert copied != article

    def test_copy_is_equal(self):
        article = Article(title="T", content=[ArticleContent("00:00:01", "Hi", important=True)])
        assert article.copy() == article

    def test_review_state(self):
        assert Article(reviewState="completed").review_state is ReviewState.COMPLETED
        assert Article(reviewState="bogus").review_state is None
        assert Article().review_state is None


class TestReviewState:

    def test_raw_values(self):
        assert [s.value for s in ReviewState] == ["notStarted", "inProgress", "completed"]

    def test_parse(self):
        assert ReviewState.parse("inProgress") is ReviewState.IN_PROGRESS
        assert ReviewState.parse("done") is None
        assert ReviewState.parse(None) is None
        assert ReviewState.parse(3) is None

    def test_display_and_icon(self):
        assert ReviewState.COMPLETED.display_name == "Completed"
        assert ReviewState.NOT_STARTED.icon_name == "circle"


class TestTypoCorrection:

    def test_to_dict(self):
        c = TypoCorrection("teh", "the", id="abc")
        assert c.to_dict() == {"id": "abc", "replacement": "the", "source": "teh"}

    def test_from_dict_keeps_id(self):
        c = TypoCorrection.from_dict({"id": "abc", "source": "teh", "replacement": "the"})
        assert c.id == "abc"
        assert c.source == "teh"

    def test_from_dict_generates_id(self):
        c = TypoCorrection.from_dict({"source": "teh", "replacement": "the"})
        assert c.id

    def test_from_dict_invalid(self):
        with pytest.raises(ValueError):
            TypoCorrection.from_dict({"source": "teh"})


class TestMisc:

    def test_validation_issue_is_error(self):
        assert ValidationIssue("x", Severity.ERROR).is_error
        assert not ValidationIssue("x", Severity.WARNING, "fix").is_error

    def test_file_node_name(self):
        node = FileNode(Path("/data/a/talk.json"), is_directory=False)
        assert node.name == "talk.json"
        assert node.children is None
