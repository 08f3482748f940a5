import datetime
import logging
import re
from typing import Callable, List, Optional, Tuple

from app.schemas.blog import ContentUnit, FrontMatter, Post
from app.settings import settings

logger = logging.getLogger(__name__)

NO_EXCERPT = "No excerpt available"
NO_CONTENT = "No content available"

RECOGNIZED_KEYS = ("title", "author", "date", "excerpt", "tags")

FRONT_MATTER_PATTERN = re.compile(r"\A---\n(?:(.*?)\n)?---(?:\n(.*))?\Z", re.DOTALL)
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")
LIST_MARKER_PATTERN = re.compile(r"^[-*]\s*")
PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n[ \t]*\n")
QUOTE_CHARS = "\"'"


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def format_timestamp(value: datetime.datetime) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    value = value.astimezone(datetime.timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> Optional[datetime.datetime]:
    """Parse an ISO-8601 timestamp, or return None if it is not a real point in time.

    Naive timestamps are taken as UTC so every result is comparable.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def humanize_slug(slug: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))


class FrontMatterParser:
    """
    Turns the raw text of one content file into a fully populated Post.

    Parsing is tolerant: malformed fields fall back to defaults with a
    warning, and no input makes ``parse`` raise.
    """

    def __init__(
        self,
        default_author: str | None = None,
        excerpt_length: int | None = None,
        now: Callable[[], datetime.datetime] = utc_now,
    ):
        self.default_author = default_author if default_author is not None else settings.DEFAULT_AUTHOR
        self.excerpt_length = excerpt_length if excerpt_length is not None else settings.EXCERPT_LENGTH
        self.now = now

    def parse_unit(self, unit: ContentUnit) -> Post:
        return self.parse(unit.raw_text, unit.slug, language=unit.language)

    def parse(self, raw_text: str, slug_hint: str, language: str | None = None) -> Post:
        language = language or settings.DEFAULT_LANGUAGE
        front_matter_text, body = split_front_matter(raw_text, slug_hint)
        fields = self.parse_fields(front_matter_text, slug_hint) if front_matter_text else FrontMatter()
        return self.fill_defaults(fields, body, slug_hint, language)

    def parse_fields(self, front_matter_text: str, slug: str) -> FrontMatter:
        values = {}
        for key, value in _iter_entries(front_matter_text):
            if key not in RECOGNIZED_KEYS or not value:
                continue
            if key == "date":
                values["date"] = self._parse_date(value, slug)
            elif key == "tags":
                values["tags"] = self._parse_tags(value, slug)
            else:
                values[key] = value
        return FrontMatter(**values)

    def fill_defaults(self, fields: FrontMatter, body: str, slug: str, language: str) -> Post:
        excerpt = fields.excerpt or derive_excerpt(body, self.excerpt_length)
        return Post(
            id=slug,
            slug=slug,
            language=language,
            title=fields.title or humanize_slug(slug),
            author=fields.author or self.default_author,
            date=fields.date or format_timestamp(self.now()),
            excerpt=excerpt or NO_EXCERPT,
            content=body if body.strip() else NO_CONTENT,
            tags=tuple(fields.tags or ()),
        )

    def _parse_date(self, value: str, slug: str) -> Optional[str]:
        cleaned = value.strip().strip(QUOTE_CHARS).strip()
        if not DATE_PATTERN.match(cleaned):
            logger.warning(f"Invalid date {value!r} in post {slug}, using current time")
            return None
        return cleaned if "T" in cleaned else f"{cleaned}T00:00:00Z"

    def _parse_tags(self, value: str, slug: str) -> List[str]:
        tags = parse_tags(value)
        if not tags:
            logger.warning(f"No usable tags in {value!r} for post {slug}")
        return tags


def split_front_matter(raw_text: str, slug: str = "") -> Tuple[Optional[str], str]:
    """Split text into (front matter block, body).

    The block must open on the first line and close on a later line, both
    exactly ``---``. Without a block the whole text is the body.
    """
    text = raw_text.replace("\r\n", "\n")
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        if text.startswith("---\n"):
            logger.warning(f"Unterminated front matter in post {slug}, treating it as body")
        return None, text
    return match.group(1) or "", match.group(2) or ""


def _iter_entries(front_matter_text: str):
    """Yield (key, value) pairs.

    List-item lines continue a key whose own line left the value empty.
    """
    key = None
    lines: List[str] = []
    for line in front_matter_text.split("\n"):
        stripped = line.strip()
        if key is not None and not lines[0] and stripped.startswith(("-", "*")):
            lines.append(stripped)
            continue
        if ":" not in line:
            continue
        if key is not None:
            yield key, "\n".join(lines).strip()
        raw_key, _, rest = line.partition(":")
        key = raw_key.strip()
        lines = [rest.strip()]
    if key is not None:
        yield key, "\n".join(lines).strip()


def _clean_tag(tag: str) -> str:
    return tag.strip().strip(QUOTE_CHARS).strip()


def _split_commas(value: str) -> List[str]:
    return [tag for tag in (_clean_tag(t) for t in value.split(",")) if tag]


def parse_tags(value: str) -> List[str]:
    """Parse a tags value written as ``[a, b]``, as ``- a`` lines, or as ``a, b``."""
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        return _split_commas(value[1:-1])

    tags = [
        tag
        for tag in (_clean_tag(LIST_MARKER_PATTERN.sub("", line.strip())) for line in value.split("\n"))
        if tag
    ]
    if not tags or (len(tags) == 1 and "," in tags[0]):
        tags = _split_commas(value)
    return tags


def derive_excerpt(body: str, length: int = 150) -> Optional[str]:
    """First non-empty, non-heading paragraph, cut to ``length`` characters."""
    for paragraph in PARAGRAPH_SPLIT_PATTERN.split(body):
        paragraph = paragraph.strip()
        if not paragraph or paragraph.startswith("#"):
            continue
        if len(paragraph) > length:
            return paragraph[:length].rstrip() + "..."
        return paragraph
    return None
