"""
Comments: list, get, create, delete. Input is trimmed and length-checked before it reaches MySQL.
"""
from errors import InvalidArgument
from services.clock import format_timestamp

MAX_AUTHOR_LENGTH = 80
MAX_CONTENT_LENGTH = 2000


class CommentStore:
    def __init__(self, database):
        self.db = database

    def list(self, limit, offset):
        return self.db.query(
            "SELECT id, author, content, created_at FROM comments ORDER BY id DESC LIMIT %s OFFSET %s",
            (limit, offset),
        )

    def get(self, comment_id):
        return self.db.query_one(
            "SELECT id, author, content, created_at FROM comments WHERE id = %s",
            (comment_id,),
        )

    def create(self, author, content, created_at):
        lastrowid, _ = self.db.execute(
            "INSERT INTO comments (author, content, created_at) VALUES (%s, %s, %s)",
            (author, content, created_at),
        )
        return lastrowid

    def delete(self, comment_id):
        _, rowcount = self.db.execute("DELETE FROM comments WHERE id = %s", (comment_id,))
        return rowcount


def _clean(value):
    return "" if value is None else str(value).strip()


def create_comment(store, data, now):
    """Validate author/content from a request body and insert. Returns the new id."""
    author = _clean(data.get("author"))
    content = _clean(data.get("content"))
    if not author:
        raise InvalidArgument("author_required")
    if not content:
        raise InvalidArgument("content_required")
    if len(author) > MAX_AUTHOR_LENGTH:
        raise InvalidArgument("author_too_long")
    if len(content) > MAX_CONTENT_LENGTH:
        raise InvalidArgument("content_too_long")
    return store.create(author, content, format_timestamp(now))
