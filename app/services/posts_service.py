import logging
from typing import List, Optional, Tuple

from app.repos.content_repo import ContentSource
from app.schemas.blog import ContentUnit, Post
from app.services.content_parser import FrontMatterParser, parse_timestamp
from app.settings import settings

logger = logging.getLogger(__name__)


class PostsService:
    """
    Query layer over a content source.

    Every call re-reads and re-parses the store; nothing is cached between
    calls. No exception escapes a public method: failures are logged and
    surface as an empty list or ``None``.
    """

    def __init__(
        self,
        repo: ContentSource,
        parser: FrontMatterParser | None = None,
        default_language: str | None = None,
        recent_count: int | None = None,
    ):
        self.repo = repo
        self.parser = parser or FrontMatterParser()
        self.default_language = default_language or settings.DEFAULT_LANGUAGE
        self.recent_count = recent_count if recent_count is not None else settings.RECENT_POSTS_COUNT

    def get_all_posts(self, language: str | None = None) -> List[Post]:
        language = language or self.default_language
        try:
            units = self.repo.list_units(language)
        except Exception as e:
            logger.error(f"Error listing posts for language {language}: {e}")
            return []

        posts = [post for post in (self._parse_unit(unit) for unit in units) if post]
        return sort_posts(posts)

    def get_post_by_slug(self, slug: str, language: str | None = None) -> Optional[Post]:
        language = language or self.default_language
        try:
            unit = self.repo.get_unit(slug, language)
            if unit is None and language != self.default_language:
                logger.info(
                    f"Post {slug} not found in language {language}, "
                    f"trying fallback to {self.default_language}"
                )
                unit = self.repo.get_unit(slug, self.default_language)
        except Exception as e:
            logger.error(f"Error finding post {slug} in language {language}: {e}")
            return None

        if unit is None:
            logger.debug(f"Post {slug} not found")
            return None
        return self._parse_unit(unit)

    def get_recent_posts(self, count: int | None = None, language: str | None = None) -> List[Post]:
        count = self.recent_count if count is None else max(count, 0)
        return self.get_all_posts(language)[:count]

    def get_available_languages(self, slug: str) -> List[str]:
        try:
            return list(self.repo.available_languages(slug))
        except Exception as e:
            logger.error(f"Error getting available languages for post {slug}: {e}")
            return []

    def _parse_unit(self, unit: ContentUnit) -> Optional[Post]:
        try:
            return self.parser.parse_unit(unit)
        except Exception as e:
            logger.warning(f"Skipping malformed post {unit.slug} ({unit.language}): {e}")
            return None


def _date_sort_key(post: Post) -> Tuple[int, float]:
    parsed = parse_timestamp(post.date)
    if parsed is None:
        return (1, 0.0)
    return (0, -parsed.timestamp())


def sort_posts(posts: List[Post]) -> List[Post]:
    """Newest first; posts whose date does not parse go last, in input order."""
    return sorted(posts, key=_date_sort_key)
