"""Aggregations over cached posts, users and comment counts.

Pure functions: callers load the documents (see services/analytics.py) and
pass them in, so everything here is plain list/dict manipulation.
"""

from collections import Counter

TOP_USERS_LIMIT = 5
LATEST_POSTS_LIMIT = 5


def post_author(post: dict) -> str | None:
    """Author id of a post. The remote API spells it ``userid``."""
    if not isinstance(post, dict):
        return None
    author = post.get("userid")
    if author is None:
        author = post.get("userId")
    return str(author) if author is not None else None


def _numeric_id(post: dict) -> int | None:
    if not isinstance(post, dict):
        return None
    try:
        return int(post["id"])
    except (KeyError, TypeError, ValueError):
        return None


def top_users(posts: list[dict], users: dict[str, str], limit: int = TOP_USERS_LIMIT) -> list[dict]:
    """Users with the most posts, highest first; equal counts ordered by user id."""
    counts = Counter(author for author in map(post_author, posts) if author is not None)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        {"id": user_id, "name": users.get(user_id), "post_count": count}
        for user_id, count in ranked[:limit]
    ]


def latest_posts(posts: list[dict], limit: int = LATEST_POSTS_LIMIT) -> list[dict]:
    """Posts with the highest ids."""
    numbered = [post for post in posts if _numeric_id(post) is not None]
    numbered.sort(key=_numeric_id, reverse=True)
    return numbered[:limit]


def popular_posts(posts: list[dict], comments: dict[str, int]) -> list[dict]:
    """Every post tied for the highest comment count, in cached order."""
    counts = [count for count in comments.values() if isinstance(count, int)]
    if not counts:
        return []
    top = max(counts)
    return [
        post
        for post in posts
        if isinstance(post, dict) and "id" in post and comments.get(str(post["id"])) == top
    ]
