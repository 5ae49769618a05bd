"""Community feed: posts, comments and reactions."""

import logging

from access_hub.config import ANONYMOUS_AUTHOR, POSTS, REACTION_RETRIES
from access_hub.database import DocumentStore, require_user
from access_hub.errors import DocumentNotFound, PreconditionFailed, ValidationError
from access_hub.models import Comment, Post, ReactionType, UserIdentity

logger = logging.getLogger(__name__)


def _display_name(user: UserIdentity) -> str:
    return (user.name or "").strip() or ANONYMOUS_AUTHOR


def _require_content(content: str, label: str) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError(f"{label} cannot be empty.")
    return text


def create_post(store: DocumentStore, user: UserIdentity | None, content: str) -> str:
    """Publish a post to the community feed and return its ID."""
    user = require_user(user)
    text = _require_content(content, "Post")

    post_id = store.insert(POSTS, {
        "user_id": user.uid,
        "user_name": _display_name(user),
        "content": text,
        "comments": [],
        "reactions": {},
        "reaction_version": 0,
    })
    logger.info("Post %s created by %s", post_id, user.uid)
    return post_id


def list_posts(store: DocumentStore) -> list[Post]:
    """Get every post, newest first."""
    return [Post.from_record(r) for r in store.query(POSTS)]


def get_post(store: DocumentStore, post_id: str) -> Post:
    row = store.get(POSTS, post_id)
    if row is None:
        raise DocumentNotFound(POSTS, post_id)
    return Post.from_record(row)


def add_comment(store: DocumentStore, user: UserIdentity | None, post_id: str, content: str) -> Comment:
    """Append a comment to a post. Comments keep append order and carry the store's timestamp."""
    user = require_user(user)
    text = _require_content(content, "Comment")

    stored = store.append(POSTS, post_id, "comments", {
        "user_id": user.uid,
        "user_name": _display_name(user),
        "content": text,
    })
    logger.info("Comment on post %s by %s", post_id, user.uid)
    return Comment.from_record(stored)


def toggle_reaction(
    store: DocumentStore,
    user: UserIdentity | None,
    post_id: str,
    reaction: ReactionType | str,
) -> ReactionType | None:
    """Set the caller's reaction on a post, or clear it if it is already that reaction.

    Each user holds at most one reaction per post. Writes are conditional on
    ``reaction_version``, so concurrent toggles from different users never
    overwrite each other; a lost race is retried against a fresh copy.

    Returns:
        The caller's reaction after the toggle, or None when it was cleared
    """
    user = require_user(user)
    try:
        reaction = ReactionType(reaction)
    except ValueError as e:
        raise ValidationError(f"Unknown reaction: {reaction}") from e

    for _ in range(REACTION_RETRIES):
        post = get_post(store, post_id)
        reactions = {uid: r.value for uid, r in post.reactions.items()}
        if post.reaction_of(user.uid) == reaction:
            reactions.pop(user.uid)
            result = None
        else:
            reactions[user.uid] = reaction.value
            result = reaction

        updated = store.update(
            POSTS, post_id,
            changes={"reactions": reactions, "reaction_version": post.reaction_version + 1},
            expected={"reaction_version": post.reaction_version},
        )
        if updated:
            logger.info("Reaction on post %s by %s is now %s", post_id, user.uid, result)
            return result

    logger.warning("Reaction on post %s by %s kept conflicting", post_id, user.uid)
    raise PreconditionFailed(f"Post {post_id} changed while reacting. Please try again.")
