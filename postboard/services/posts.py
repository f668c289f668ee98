"""Post storage scoped to the owning user."""

import logging

from sqlalchemy.orm import Session

from postboard.models.post import Post
from postboard.schemas.auth import TokenIdentity

logger = logging.getLogger(__name__)


class PostService:
    """Create, list, update and delete posts on behalf of their owner.

    Update and delete filter on both post id and owner id in one statement,
    so a post that does not exist and a post owned by someone else are
    reported the same way.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self, owner: TokenIdentity, title: str, content: str, image_url: str | None = None
    ) -> Post:
        """Create a post owned by the requester."""
        post = Post(
            title=title,
            content=content,
            author=owner.email,
            image_url=image_url,
            user_id=owner.id,
        )
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info(f"User {owner.id} created post {post.id}")
        return post

    def list_for_owner(self, user_id: int) -> list[Post]:
        """Get all posts owned by a user."""
        return self.db.query(Post).filter(Post.user_id == user_id).order_by(Post.id).all()

    def update(self, post_id: int, user_id: int, title: str, content: str) -> bool:
        """Replace title and content of an owned post. Returns False if not owned."""
        updated = (
            self.db.query(Post)
            .filter(Post.id == post_id, Post.user_id == user_id)
            .update({"title": title, "content": content}, synchronize_session=False)
        )
        self.db.commit()
        if updated:
            logger.info(f"User {user_id} updated post {post_id}")
        return updated > 0

    def delete(self, post_id: int, user_id: int) -> bool:
        """Delete an owned post. Returns False if not owned."""
        deleted = (
            self.db.query(Post)
            .filter(Post.id == post_id, Post.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted:
            logger.info(f"User {user_id} deleted post {post_id}")
        return deleted > 0
