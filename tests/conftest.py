import datetime
import textwrap

import pytest

from app.repos.content_repo import InMemoryContentRepo
from app.services.content_parser import FrontMatterParser

FIXED_NOW = datetime.datetime(2025, 1, 15, 12, 30, 0, tzinfo=datetime.timezone.utc)
FIXED_NOW_ISO = "2025-01-15T12:30:00.000Z"

LANGUAGES = ("en", "es", "da")


def fixed_clock():
    return FIXED_NOW


def md(raw: str) -> str:
    """Dedent an inline markdown fixture and drop the leading newline."""
    return textwrap.dedent(raw).lstrip()


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    Records the arguments each method was called with.
    """

    def __init__(
        self,
        all_posts_return=None,
        recent_posts_return=None,
        post_return=None,
        languages_return=None,
    ):
        self._all_posts_return = all_posts_return or []
        self._recent_posts_return = recent_posts_return or []
        self._post_return = post_return
        self._languages_return = languages_return or []
        self.calls = []

    def get_all_posts(self, language=None):
        self.calls.append(("get_all_posts", language))
        return self._all_posts_return

    def get_recent_posts(self, count=None, language=None):
        self.calls.append(("get_recent_posts", count, language))
        return self._recent_posts_return

    def get_post_by_slug(self, slug, language=None):
        self.calls.append(("get_post_by_slug", slug, language))
        return self._post_return

    def get_available_languages(self, slug):
        self.calls.append(("get_available_languages", slug))
        return self._languages_return


class BrokenRepo:
    """Content source whose every call fails, as if the store went away."""

    def list_units(self, language):
        raise OSError("store unreachable")

    def get_unit(self, slug, language):
        raise OSError("store unreachable")

    def exists(self, slug, language):
        raise OSError("store unreachable")

    def available_languages(self, slug):
        raise OSError("store unreachable")


@pytest.fixture
def parser():
    return FrontMatterParser(default_author="Site Owner", excerpt_length=150, now=fixed_clock)


@pytest.fixture
def make_repo():
    """Factory for an in-memory repo from ``{(slug, lang): markdown}``."""

    def _make(units):
        return InMemoryContentRepo(
            {key: md(text) for key, text in units.items()}, languages=LANGUAGES
        )

    return _make


@pytest.fixture
def content_dir(tmp_path):
    """Factory writing ``<slug>/<lang>.md`` files under a temporary content root."""
    root = tmp_path / "content" / "blog"
    root.mkdir(parents=True)

    def _write(slug: str, language: str, text: str):
        post_dir = root / slug
        post_dir.mkdir(parents=True, exist_ok=True)
        path = post_dir / f"{language}.md"
        path.write_text(md(text), encoding="utf-8")
        return path

    _write.root = root
    return _write
