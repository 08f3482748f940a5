from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class ContentUnit(BaseModel):
    """One raw ``<slug>/<language>.md`` source file, before parsing."""

    model_config = ConfigDict(frozen=True)

    slug: str
    language: str
    raw_text: str


class FrontMatter(BaseModel):
    """Fields read from a front-matter block. ``None`` means not set."""

    title: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    excerpt: Optional[str] = None
    tags: Optional[List[str]] = None


class PostSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    language: str
    title: str
    author: str
    date: str
    excerpt: str
    tags: Tuple[str, ...] = ()


class Post(PostSummary):
    content: str  # Markdown content without frontmatter

    def summary(self) -> PostSummary:
        return PostSummary(**self.model_dump(exclude={"content"}))
