"""Tests for Author and AuthorParser."""

import pytest

from git_together.author import Author, AuthorParser
from git_together.errors import AuthorParseError, MissingDomain, MissingEmailSeed, MissingName


@pytest.fixture
def parser() -> AuthorParser:
    return AuthorParser(domain="rocinante.com")


class TestAuthorParser:
    """Test suite for AuthorParser.parse."""

    def test_local_part_uses_domain(self, parser):
        """A bare local part is completed with the configured domain."""
        assert parser.parse("James Holden; jholden") == Author("James Holden", "jholden@rocinante.com")

    def test_full_email_is_kept(self, parser):
        """An email with a domain is used as it is."""
        assert parser.parse("Bobbie Draper; bdraper@mars.mil") == Author("Bobbie Draper", "bdraper@mars.mil")

    def test_full_email_without_domain(self):
        """A full email does not need a configured domain."""
        parser = AuthorParser()
        assert parser.parse("Joe Miller; jmiller@starhelix.com") == Author("Joe Miller", "jmiller@starhelix.com")

    def test_whitespace_is_trimmed(self, parser):
        assert parser.parse("  Amos Burton ;   aburton  ") == Author("Amos Burton", "aburton@rocinante.com")

    @pytest.mark.parametrize(
        "raw,error",
        [
            ("", MissingName),
            ("   ; jholden", MissingName),
            ("Naomi Nagata", MissingEmailSeed),
            ("Chrisjen Avasarala;", MissingEmailSeed),
            ("Chrisjen Avasarala;   ", MissingEmailSeed),
        ],
    )
    def test_invalid_raw_values(self, parser, raw, error):
        """Test parsing values with a missing name or email."""
        with pytest.raises(error):
            parser.parse(raw)

    def test_missing_domain(self):
        """A bare local part without a configured domain cannot be completed."""
        with pytest.raises(MissingDomain) as excinfo:
            AuthorParser(domain=None).parse("James Holden; jholden")
        assert "jholden" in str(excinfo.value)
        assert isinstance(excinfo.value, AuthorParseError)


class TestAuthor:
    """Test suite for the Author value type."""

    def test_str(self):
        assert str(Author("James Holden", "jholden@rocinante.com")) == "James Holden <jholden@rocinante.com>"

    def test_trailer(self):
        author = Author("Naomi Nagata", "nnagata@rocinante.com")
        assert author.trailer == "Co-authored-by: Naomi Nagata <nnagata@rocinante.com>"

    def test_equality_is_structural(self):
        assert Author("A", "a@b.c") == Author("A", "a@b.c")
        assert Author("A", "a@b.c") != Author("A", "x@b.c")

    def test_immutable(self):
        author = Author("A", "a@b.c")
        with pytest.raises(AttributeError):
            author.name = "B"
