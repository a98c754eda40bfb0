"""
Blog API schemas (request/response models).

Responses use camelCase timestamp names on the wire (`createdAt`, `updatedAt`).
Request fields are all optional at the schema level: required-ness and
blank checks belong to the service so the API can answer 400 with a specific
message.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .models import Post


class CreatePostRequest(BaseModel):
    title: str | None = None
    content: str | None = None


class UpdatePostRequest(BaseModel):
    title: str | None = None
    content: str | None = None

    def present_fields(self) -> set[str]:
        # A key sent as JSON null is present; a key left out is not.
        return set(self.model_fields_set) & {"title", "content"}


class PostResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    content: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostEnvelope(BaseModel):
    message: str
    post: PostResponse
