"""
Blog post API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from . import schemas, service
from .dependencies import get_post_store
from .repository import PostStore

router = APIRouter(prefix="/blog")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=schemas.PostEnvelope)
async def create_post(
    payload: schemas.CreatePostRequest,
    store: PostStore = Depends(get_post_store),
) -> dict:
    post = await service.create_post(store, payload)
    return {"message": "Blog post created successfully", "post": post}


@router.get("", response_model=list[schemas.PostResponse])
async def list_posts(store: PostStore = Depends(get_post_store)) -> list[schemas.PostResponse]:
    """
    All posts, newest first. Filtering happens client-side.
    """
    return await service.list_posts(store)


@router.get("/{post_id}", response_model=schemas.PostResponse)
async def get_post(
    post_id: str,
    store: PostStore = Depends(get_post_store),
) -> schemas.PostResponse:
    return await service.get_post(store, post_id)


@router.put("/{post_id}", response_model=schemas.PostEnvelope)
async def update_post(
    post_id: str,
    request: Request,
    store: PostStore = Depends(get_post_store),
) -> dict:
    """
    Body is `{title?, content?}`. It is read raw and validated by the service
    after the post is found, so a missing post answers 404 whatever the body.
    """
    body = await request.body()
    post = await service.update_post(store, post_id, body)
    return {"message": "Blog post updated successfully", "post": post}


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_post(
    post_id: str,
    store: PostStore = Depends(get_post_store),
) -> Response:
    await service.delete_post(store, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
