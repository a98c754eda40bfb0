"""
Plain data types passed between the store and the service.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

TITLE_MAX_LENGTH = 255


@dataclass(frozen=True)
class Post:
    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Post":
        return cls(
            id=int(row["id"]),
            title=str(row["title"]),
            content=str(row["content"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


@dataclass(frozen=True)
class PostPatch:
    """
    Fields to overwrite on update. `None` means "leave the column as it is".
    """

    title: str | None = None
    content: str | None = None

    def is_empty(self) -> bool:
        return self.title is None and self.content is None
