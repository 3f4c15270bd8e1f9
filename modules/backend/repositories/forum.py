"""
Forum Repositories.
"""

from sqlalchemy import func, select

from modules.backend.models.forum import ForumCategory, ForumPost, ForumReply
from modules.backend.models.user import User
from modules.backend.repositories.base import BaseRepository


class ForumCategoryRepository(BaseRepository[ForumCategory]):
    model = ForumCategory
    label = "Forum category"

    async def list_active(self) -> list[ForumCategory]:
        result = await self.session.execute(
            select(ForumCategory)
            .where(ForumCategory.is_active.is_(True))
            .order_by(ForumCategory.name)
        )
        return list(result.scalars().all())


class ForumPostRepository(BaseRepository[ForumPost]):
    model = ForumPost
    label = "Forum post"

    async def list_posts(
        self, category_id: str | None = None, limit: int = 20,
    ) -> list[tuple[ForumPost, User]]:
        """Sticky posts first, then newest."""
        query = select(ForumPost, User).join(User, User.id == ForumPost.author_id)
        if category_id:
            query = query.where(ForumPost.category_id == category_id)
        result = await self.session.execute(
            query.order_by(ForumPost.is_sticky.desc(), ForumPost.created_at.desc()).limit(limit)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def count_by_author(self, author_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(ForumPost).where(ForumPost.author_id == author_id)
        )
        return result.scalar_one()


class ForumReplyRepository(BaseRepository[ForumReply]):
    model = ForumReply
    label = "Forum reply"

    async def list_for_post(self, post_id: str) -> list[tuple[ForumReply, User]]:
        result = await self.session.execute(
            select(ForumReply, User)
            .join(User, User.id == ForumReply.author_id)
            .where(ForumReply.post_id == post_id)
            .order_by(ForumReply.created_at)
        )
        return [(row[0], row[1]) for row in result.all()]
