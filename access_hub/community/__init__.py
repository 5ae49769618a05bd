# Community layer - feed posts, comments and reactions

from access_hub.community.feed import (
    create_post,
    list_posts,
    get_post,
    add_comment,
    toggle_reaction,
)

__all__ = [
    "create_post",
    "list_posts",
    "get_post",
    "add_comment",
    "toggle_reaction",
]
