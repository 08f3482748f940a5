from fastapi import Depends

from app.repos.content_repo import FileSystemContentRepo
from app.services.content_parser import FrontMatterParser
from app.services.posts_service import PostsService
from app.settings import Settings, settings


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_content_repo(current_settings: Settings = Depends(get_settings)):
    return FileSystemContentRepo(
        root=current_settings.CONTENT_DIR,
        languages=current_settings.SUPPORTED_LANGUAGES,
    )


def get_content_parser(current_settings: Settings = Depends(get_settings)):
    return FrontMatterParser(
        default_author=current_settings.DEFAULT_AUTHOR,
        excerpt_length=current_settings.EXCERPT_LENGTH,
    )


def get_posts_service(
    repo=Depends(get_content_repo),
    parser=Depends(get_content_parser),
    current_settings: Settings = Depends(get_settings),
):
    return PostsService(
        repo=repo,
        parser=parser,
        default_language=current_settings.DEFAULT_LANGUAGE,
        recent_count=current_settings.RECENT_POSTS_COUNT,
    )
