import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from app.schemas.blog import ContentUnit
from app.settings import settings

logger = logging.getLogger(__name__)


class ContentSource(Protocol):
    """Read-only store of ``(slug, language)`` content units."""

    def list_units(self, language: str) -> List[ContentUnit]: ...

    def get_unit(self, slug: str, language: str) -> Optional[ContentUnit]: ...

    def exists(self, slug: str, language: str) -> bool: ...

    def available_languages(self, slug: str) -> List[str]: ...


class FileSystemContentRepo:
    """
    Content store laid out as ``<root>/<slug>/<language>.md``.
    A missing root is treated as an empty store.
    """

    def __init__(self, root: Path | str | None = None, languages: Iterable[str] | None = None):
        self.root = Path(root if root is not None else settings.CONTENT_DIR)
        self.languages: Tuple[str, ...] = tuple(
            languages if languages is not None else settings.SUPPORTED_LANGUAGES
        )

    def list_units(self, language: str) -> List[ContentUnit]:
        if language not in self.languages:
            logger.debug(f"Unsupported language requested: {language}")
            return []

        units = []
        for slug in self._list_slugs():
            unit = self._read_unit(slug, language)
            if unit:
                units.append(unit)
        return units

    def get_unit(self, slug: str, language: str) -> Optional[ContentUnit]:
        if not self._store_available() or not self._exists(slug, language):
            return None
        return self._read_unit(slug, language)

    def exists(self, slug: str, language: str) -> bool:
        return self._store_available() and self._exists(slug, language)

    def available_languages(self, slug: str) -> List[str]:
        if not self._store_available():
            return []
        return [lang for lang in self.languages if self._exists(slug, lang)]

    def _store_available(self) -> bool:
        try:
            if self.root.is_dir():
                return True
            logger.warning(f"Content store not found: {self.root}")
        except OSError as e:
            logger.warning(f"Content store unreachable at {self.root}: {e}")
        return False

    def _exists(self, slug: str, language: str) -> bool:
        if language not in self.languages or not self._is_valid_slug(slug):
            return False
        try:
            return self._is_valid_file(self._path_for(slug, language))
        except OSError as e:
            logger.warning(f"Could not stat {slug}/{language}.md: {e}")
            return False

    def _list_slugs(self) -> List[str]:
        if not self._store_available():
            return []
        try:
            return sorted(
                entry.name
                for entry in self.root.iterdir()
                if entry.is_dir()
                and not entry.is_symlink()
                and self._is_valid_slug(entry.name)
            )
        except OSError as e:
            logger.warning(f"Content store unreachable at {self.root}: {e}")
            return []

    def _read_unit(self, slug: str, language: str) -> Optional[ContentUnit]:
        path = self._path_for(slug, language)
        try:
            if not self._is_valid_file(path):
                return None
            raw_text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable content unit {path}: {e}")
            return None
        return ContentUnit(slug=slug, language=language, raw_text=raw_text)

    def _path_for(self, slug: str, language: str) -> Path:
        return self.root / slug / f"{language}.md"

    @staticmethod
    def _is_valid_file(path: Path) -> bool:
        return path.is_file() and not path.is_symlink()

    @staticmethod
    def _is_valid_slug(slug: str) -> bool:
        return bool(slug) and not slug.startswith(".") and "/" not in slug and "\\" not in slug


class InMemoryContentRepo:
    """
    Dict-backed content store keyed by ``(slug, language)``.
    Useful for tests and for content bundled with the application.
    """

    def __init__(
        self,
        units: Dict[Tuple[str, str], str] | None = None,
        languages: Iterable[str] | None = None,
    ):
        self.units = dict(units or {})
        self.languages: Tuple[str, ...] = tuple(
            languages if languages is not None else settings.SUPPORTED_LANGUAGES
        )

    def list_units(self, language: str) -> List[ContentUnit]:
        return [
            ContentUnit(slug=slug, language=lang, raw_text=text)
            for (slug, lang), text in sorted(self.units.items())
            if lang == language and lang in self.languages
        ]

    def get_unit(self, slug: str, language: str) -> Optional[ContentUnit]:
        if not self.exists(slug, language):
            return None
        return ContentUnit(slug=slug, language=language, raw_text=self.units[(slug, language)])

    def exists(self, slug: str, language: str) -> bool:
        return language in self.languages and (slug, language) in self.units

    def available_languages(self, slug: str) -> List[str]:
        return [lang for lang in self.languages if self.exists(slug, lang)]
