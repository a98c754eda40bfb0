"""
HTTP client for the blog API.

Used endpoints:
- GET    /blog       -> [post, ...] newest first
- GET    /blog/{id}  -> post
- POST   /blog       -> {"message": "...", "post": post}
- PUT    /blog/{id}  -> {"message": "...", "post": post}
- DELETE /blog/{id}  -> 204

Also hosts `filter_posts`, the list view's in-memory search over an
already-fetched list.
"""

from __future__ import annotations

import os
from typing import Any, Iterable, Protocol, TypeVar

import httpx

from .schemas import PostResponse


class BlogClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def api_base_url() -> str:
    return os.environ.get("BLOG_API_URL", "").strip() or "http://localhost:3000"


def _error_detail(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        # Avoid dumping huge bodies; include a small snippet.
        return resp.text[:500]
    if isinstance(data, dict) and isinstance(data.get("detail"), str):
        return data["detail"]
    return resp.text[:500]


class BlogClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    async def _request(self, method: str, path: str, *, json: dict[str, Any] | None = None) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_s,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise BlogClientError(f"Blog API request failed: {method} {path}: {exc}") from exc

        if resp.status_code >= 400:
            raise BlogClientError(_error_detail(resp), status_code=resp.status_code)
        return resp

    async def get_all_posts(self) -> list[PostResponse]:
        resp = await self._request("GET", "/blog")
        data = resp.json()
        if not isinstance(data, list):
            raise BlogClientError("Blog API returned a non-list post collection.")
        return [PostResponse.model_validate(item) for item in data]

    async def get_post(self, post_id: int) -> PostResponse:
        resp = await self._request("GET", f"/blog/{post_id}")
        return PostResponse.model_validate(resp.json())

    async def create_post(self, *, title: str, content: str) -> PostResponse:
        resp = await self._request("POST", "/blog", json={"title": title, "content": content})
        return PostResponse.model_validate(resp.json()["post"])

    async def update_post(
        self,
        post_id: int,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> PostResponse:
        # Only send what the caller changed; absent keys stay untouched server-side.
        body: dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if content is not None:
            body["content"] = content

        resp = await self._request("PUT", f"/blog/{post_id}", json=body)
        return PostResponse.model_validate(resp.json()["post"])

    async def delete_post(self, post_id: int) -> None:
        await self._request("DELETE", f"/blog/{post_id}")


class _HasText(Protocol):
    title: str
    content: str


T = TypeVar("T", bound=_HasText)


def filter_posts(posts: Iterable[T], term: str) -> list[T]:
    """
    Case-insensitive substring match on title or content, order preserved.
    """
    needle = (term or "").lower()
    if not needle:
        return list(posts)
    return [post for post in posts if needle in post.title.lower() or needle in post.content.lower()]
