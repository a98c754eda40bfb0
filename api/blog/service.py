"""
Blog post business logic.

Scope:
- validate and normalize input before anything is written
- call the store once per mutation
- turn unexpected persistence failures into `StorageFault`

The service holds no state of its own; every function receives the store
bound to the current request.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from pydantic import ValidationError

from core.errors import BlogError, InvalidArgument, StorageFault

from . import schemas
from .models import TITLE_MAX_LENGTH, PostPatch
from .repository import PostStore, validate_post_id

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(message: str, *, operation: str, post_id: int | None = None) -> Iterator[None]:
    try:
        yield
    except BlogError:
        raise
    except Exception as exc:
        logger.exception("storage_fault operation=%s post_id=%s", operation, post_id)
        raise StorageFault(message) from exc


def parse_post_id(raw: str | int) -> int:
    """
    Accept a positive integer, or its decimal string form from a URL path.
    """
    if isinstance(raw, int):
        return validate_post_id(raw)

    text = raw or ""
    if not (text.isascii() and text.isdigit()):
        raise InvalidArgument("Invalid blog post ID")
    return validate_post_id(int(text))


def _check_title_length(title: str) -> None:
    if len(title) > TITLE_MAX_LENGTH:
        raise InvalidArgument(f"Title must be at most {TITLE_MAX_LENGTH} characters")


def parse_update_body(raw: bytes | str | None) -> schemas.UpdatePostRequest:
    """
    Parse a PUT body. No body at all is an update with no fields.
    """
    if raw is None or not raw.strip():
        return schemas.UpdatePostRequest()
    try:
        return schemas.UpdatePostRequest.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidArgument("Invalid request body.") from exc


def _build_patch(payload: schemas.UpdatePostRequest) -> PostPatch:
    present = payload.present_fields()
    changes: dict[str, str] = {}

    for field, label in (("title", "Title"), ("content", "Content")):
        if field not in present:
            continue
        value = (getattr(payload, field) or "").strip()
        if not value:
            raise InvalidArgument(f"{label} cannot be empty")
        changes[field] = value

    if "title" in changes:
        _check_title_length(changes["title"])
    return PostPatch(**changes)


async def create_post(store: PostStore, payload: schemas.CreatePostRequest) -> schemas.PostResponse:
    title = (payload.title or "").strip()
    if not title:
        raise InvalidArgument("Title is required")

    content = (payload.content or "").strip()
    if not content:
        raise InvalidArgument("Content is required")

    _check_title_length(title)

    with _storage_errors("Failed to create blog post", operation="create"):
        post = await store.insert(title=title, content=content)

    logger.info("post_created post_id=%s", post.id)
    return schemas.PostResponse.from_post(post)


async def list_posts(store: PostStore) -> list[schemas.PostResponse]:
    with _storage_errors("Failed to fetch blog posts", operation="list"):
        posts = await store.list_all()
    return [schemas.PostResponse.from_post(post) for post in posts]


async def get_post(store: PostStore, raw_post_id: str | int) -> schemas.PostResponse:
    post_id = parse_post_id(raw_post_id)
    with _storage_errors("Failed to fetch blog post", operation="get", post_id=post_id):
        post = await store.get_by_id(post_id)
    return schemas.PostResponse.from_post(post)


async def update_post(
    store: PostStore,
    raw_post_id: str | int,
    payload: schemas.UpdatePostRequest | bytes | str | None,
) -> schemas.PostResponse:
    post_id = parse_post_id(raw_post_id)

    # A missing post is reported as 404 even when the body is also invalid,
    # so a raw body is only parsed once the post is known to exist.
    with _storage_errors("Failed to update blog post", operation="update", post_id=post_id):
        await store.get_by_id(post_id)

    if not isinstance(payload, schemas.UpdatePostRequest):
        payload = parse_update_body(payload)

    patch = _build_patch(payload)
    if patch.is_empty():
        logger.info("post_update_without_changes post_id=%s", post_id)

    with _storage_errors("Failed to update blog post", operation="update", post_id=post_id):
        post = await store.update_by_id(post_id, patch)

    logger.info("post_updated post_id=%s", post.id)
    return schemas.PostResponse.from_post(post)


async def delete_post(store: PostStore, raw_post_id: str | int) -> None:
    post_id = parse_post_id(raw_post_id)
    with _storage_errors("Failed to delete blog post", operation="delete", post_id=post_id):
        await store.delete_by_id(post_id)
    logger.info("post_deleted post_id=%s", post_id)
