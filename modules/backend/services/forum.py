"""
Forum Service.

Categories, posts and threaded replies.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ConflictError, ValidationError
from modules.backend.models.enums import ActivityType, NotificationType
from modules.backend.models.forum import ForumCategory, ForumPost, ForumReply
from modules.backend.models.user import User
from modules.backend.repositories.forum import (
    ForumCategoryRepository,
    ForumPostRepository,
    ForumReplyRepository,
)
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.forum import ForumCategoryCreate, ForumPostCreate, ForumReplyCreate
from modules.backend.services.activity import ActivityService
from modules.backend.services.base import BaseService
from modules.backend.services.notification import NotificationService


class ForumService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.categories = ForumCategoryRepository(session)
        self.posts = ForumPostRepository(session)
        self.replies = ForumReplyRepository(session)

    async def list_categories(self) -> list[ForumCategory]:
        return await self.categories.list_active()

    async def create_category(self, data: ForumCategoryCreate) -> ForumCategory:
        self._log_operation("Creating forum category", name=data.name)
        return await self._execute_db_operation(
            "create_forum_category",
            self.categories.create(**data.model_dump()),
        )

    async def create_post(self, user: User, data: ForumPostCreate) -> ForumPost:
        """
        Raises:
            NotFoundError: Unknown category
        """
        category = await self.categories.get_by_id(data.category_id)
        post = await self._execute_db_operation(
            "create_forum_post",
            self.posts.create(author_id=user.id, **data.model_dump()),
        )
        await ActivityService(self.session).record(
            user.id,
            ActivityType.FORUM_POST,
            f"{user.display_name} posted in {category.name}: {post.title}",
            metadata={"post_id": post.id, "category_id": category.id},
        )
        self._log_operation("Forum post created", post_id=post.id)
        return post

    async def list_posts(
        self, category_id: str | None = None, limit: int = 20,
    ) -> list[tuple[ForumPost, User]]:
        return await self.posts.list_posts(category_id=category_id, limit=limit)

    async def view_post(
        self, post_id: str,
    ) -> tuple[ForumPost, User, list[tuple[ForumReply, User]]]:
        """Load a post with its replies and count the view."""
        post = await self.posts.get_by_id(post_id)
        post = await self.posts.apply(post, view_count=post.view_count + 1)
        author = await UserRepository(self.session).get_by_id(post.author_id)
        return post, author, await self.replies.list_for_post(post_id)

    async def reply(self, user: User, data: ForumReplyCreate) -> ForumReply:
        """
        Raises:
            NotFoundError: Unknown post or parent reply
            ConflictError: Post is locked
            ValidationError: Parent reply belongs to another post
        """
        post = await self.posts.get_by_id(data.post_id)
        if post.is_locked:
            raise ConflictError("This post is locked")
        if data.parent_reply_id:
            parent = await self.replies.get_by_id(data.parent_reply_id)
            if parent.post_id != post.id:
                raise ValidationError("Parent reply belongs to a different post")

        reply = await self._execute_db_operation(
            "create_forum_reply",
            self.replies.create(author_id=user.id, **data.model_dump()),
        )
        await self.posts.apply(post, reply_count=post.reply_count + 1)

        if post.author_id != user.id:
            await NotificationService(self.session).notify(
                post.author_id,
                NotificationType.FORUM_REPLY,
                "New reply to your post",
                f"{user.display_name} replied to \"{post.title}\".",
                action_url=f"/forum/posts/{post.id}",
                related_entity_type="forum_post",
                related_entity_id=post.id,
            )
        self._log_operation("Forum reply created", post_id=post.id, reply_id=reply.id)
        return reply
