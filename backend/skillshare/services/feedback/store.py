import logging
from uuid import UUID

from sqlalchemy import select

from skillshare.core.errors import StoreErrorKind
from skillshare.models.feedback import Feedback
from skillshare.services.base import Store

logger = logging.getLogger(__name__)


class FeedbackStore(Store):
    """Ratings and comments left on sessions. Rows are never edited."""

    async def create_feedback(
        self, session_id: UUID, user_id: UUID, rating: int, comment: str = ""
    ) -> Feedback:
        feedback = Feedback(
            session_id=session_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
        )
        self.session.add(feedback)
        # Unique (session_id, user_id) violations surface as feedback_exists,
        # foreign key violations as a database error
        await self._commit(conflict=StoreErrorKind.FEEDBACK_EXISTS)
        await self.session.refresh(feedback)
        logger.info(f"User {user_id} rated session {session_id}: {rating}")
        return feedback

    async def list_for_session(self, session_id: UUID) -> list[Feedback]:
        result = await self._execute(
            select(Feedback)
            .where(Feedback.session_id == session_id)
            .order_by(Feedback.created_at.desc())
        )
        return list(result.scalars().all())
