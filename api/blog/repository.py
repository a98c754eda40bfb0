"""
Blog post persistence (raw SQL).

`PostStore` works on one `core.db.Session`, i.e. one connection acquired for the
current request. Each method is a single statement, so a write either happens
completely or not at all.
"""

from __future__ import annotations

from core.db import Session
from core.errors import InvalidArgument, NotFound

from .models import Post, PostPatch

POST_COLUMNS = "id, title, content, created_at, updated_at"

# Identity columns are backed by a sequence: ids only grow and are never reused,
# even after a delete.
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS blog_posts (
    id integer GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
    title varchar(255) NOT NULL CHECK (btrim(title) <> ''),
    content text NOT NULL CHECK (btrim(content) <> ''),
    created_at timestamptz NOT NULL DEFAULT now(),
    updated_at timestamptz NOT NULL DEFAULT now(),
    CHECK (updated_at >= created_at)
)
"""


async def create_schema(session: Session) -> None:
    await session.execute(SCHEMA_SQL)


# Upper bound of the integer id column.
MAX_POST_ID = 2_147_483_647


def validate_post_id(post_id: object) -> int:
    # bool is an int subclass; True must not read as post 1.
    if isinstance(post_id, bool) or not isinstance(post_id, int):
        raise InvalidArgument("Invalid blog post ID")
    if not 0 < post_id <= MAX_POST_ID:
        raise InvalidArgument("Invalid blog post ID")
    return post_id


def not_found(post_id: int) -> NotFound:
    return NotFound(f"Blog post with ID {post_id} not found")


def _non_blank(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PostStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    async def insert(self, *, title: str, content: str) -> Post:
        row = await self.session.fetch_one(
            f"""
            INSERT INTO blog_posts (title, content)
            VALUES ($1, $2)
            RETURNING {POST_COLUMNS}
            """,
            title,
            content,
        )
        if row is None:
            raise RuntimeError("Failed to insert blog post.")
        return Post.from_row(row)

    async def list_all(self) -> list[Post]:
        """
        Return every post, most recently created first.
        """
        rows = await self.session.fetch_all(
            f"""
            SELECT {POST_COLUMNS}
            FROM blog_posts
            ORDER BY created_at DESC, id DESC
            """
        )
        return [Post.from_row(row) for row in rows]

    async def get_by_id(self, post_id: int) -> Post:
        post_id = validate_post_id(post_id)
        row = await self.session.fetch_one(
            f"""
            SELECT {POST_COLUMNS}
            FROM blog_posts
            WHERE id = $1
            """,
            post_id,
        )
        if row is None:
            raise not_found(post_id)
        return Post.from_row(row)

    async def update_by_id(self, post_id: int, patch: PostPatch) -> Post:
        """
        Overwrite the non-blank fields of `patch` and refresh `updated_at`.

        An empty patch still refreshes `updated_at`.
        """
        post_id = validate_post_id(post_id)
        row = await self.session.fetch_one(
            f"""
            UPDATE blog_posts
            SET title = COALESCE($2, title),
                content = COALESCE($3, content),
                updated_at = now()
            WHERE id = $1
            RETURNING {POST_COLUMNS}
            """,
            post_id,
            _non_blank(patch.title),
            _non_blank(patch.content),
        )
        if row is None:
            raise not_found(post_id)
        return Post.from_row(row)

    async def delete_by_id(self, post_id: int) -> None:
        post_id = validate_post_id(post_id)
        row = await self.session.fetch_one(
            """
            DELETE FROM blog_posts
            WHERE id = $1
            RETURNING id
            """,
            post_id,
        )
        if row is None:
            raise not_found(post_id)

    async def count(self) -> int:
        """
        Row count. No route uses it; tests use it to check a rejected write left the table alone.
        """
        row = await self.session.fetch_one("SELECT count(*) AS total FROM blog_posts")
        return int(row["total"]) if row is not None else 0
