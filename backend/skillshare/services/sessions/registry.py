"""Session registry: scheduling, participation, search and recommendations."""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select, delete, func, or_, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from skillshare.core.errors import StoreError, StoreErrorKind
from skillshare.models.session import Session, SessionParticipant
from skillshare.models.user import User
from skillshare.services.base import Store

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_RECOMMENDATION_LIMIT = 5

SESSION_NOT_FOUND = "Session not found"


@dataclass
class SessionSearchFilters:
    """Criteria for listing sessions. Empty values are ignored."""
    q: str | None = None
    category: str | None = None
    location: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    exclude_past: bool = True


LIKE_ESCAPE = "/"


def like_pattern(text: str) -> str:
    """Substring pattern with LIKE wildcards in the user text escaped."""
    for char in (LIKE_ESCAPE, "%", "_"):
        text = text.replace(char, LIKE_ESCAPE + char)
    return f"%{text}%"


def build_search_conditions(filters: SessionSearchFilters, now: datetime | None = None) -> list:
    """Translate search filters into SQL conditions on Session."""
    conditions = []

    if filters.q:
        # Every word has to appear in the title or the description
        for word in filters.q.split():
            pattern = like_pattern(word)
            conditions.append(or_(
                Session.title.ilike(pattern, escape=LIKE_ESCAPE),
                Session.description.ilike(pattern, escape=LIKE_ESCAPE),
            ))

    if filters.category:
        conditions.append(Session.category == filters.category)

    if filters.location:
        conditions.append(Session.location.ilike(like_pattern(filters.location), escape=LIKE_ESCAPE))

    if filters.date_from:
        conditions.append(Session.date_time >= filters.date_from)

    if filters.date_to:
        conditions.append(Session.date_time <= filters.date_to)

    if filters.exclude_past:
        conditions.append(Session.date_time > (now or datetime.now(timezone.utc)))

    return conditions


def page_offset(limit: int, page: int) -> int:
    return (max(page, 1) - 1) * limit


class SessionRegistry(Store):
    """Persistence operations on sessions and their participants."""

    async def create_session(
        self,
        creator_id: UUID,
        title: str,
        category: str,
        date_time: datetime,
        location: str,
        max_participants: int,
        description: str = "",
    ) -> Session:
        session = Session(
            title=title,
            description=description,
            category=category,
            date_time=date_time,
            location=location,
            max_participants=max_participants,
            creator_id=creator_id,
        )
        self.session.add(session)
        await self._commit()
        await self.session.refresh(session)
        logger.info(f"User {creator_id} created session {session.id} '{title}'")
        return session

    async def get_session(self, session_id: UUID) -> Session:
        result = await self._execute(select(Session).where(Session.id == session_id))
        session = result.scalar_one_or_none()
        if session is None:
            raise StoreError(StoreErrorKind.NOT_FOUND, SESSION_NOT_FOUND)
        return session

    async def update_session(self, session: Session, **fields) -> Session:
        """Apply field changes to a loaded session and persist them."""
        for name, value in fields.items():
            setattr(session, name, value)
        await self._commit()
        await self.session.refresh(session)
        return session

    async def delete_session(self, session_id: UUID) -> None:
        result = await self._execute(delete(Session).where(Session.id == session_id))
        if result.rowcount == 0:
            await self.session.rollback()
            raise StoreError(StoreErrorKind.NOT_FOUND, SESSION_NOT_FOUND)
        await self._commit()
        logger.info(f"Deleted session {session_id}")

    async def list_participants(self, session_id: UUID) -> list[User]:
        result = await self._execute(
            select(User)
            .join(SessionParticipant, SessionParticipant.user_id == User.id)
            .where(SessionParticipant.session_id == session_id)
            .order_by(SessionParticipant.joined_at.asc())
        )
        return list(result.scalars().all())

    async def count_participants(self, session_id: UUID) -> int:
        result = await self._execute(
            select(func.count())
            .select_from(SessionParticipant)
            .where(SessionParticipant.session_id == session_id)
        )
        return result.scalar_one()

    async def is_participant(self, session_id: UUID, user_id: UUID) -> bool:
        result = await self._execute(
            select(SessionParticipant.user_id).where(
                SessionParticipant.session_id == session_id,
                SessionParticipant.user_id == user_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def join_session(self, session_id: UUID, user_id: UUID) -> None:
        """Add a participant while the session has room.

        The session row stays locked from the capacity check until the
        insert commits, so concurrent joins at capacity serialize.
        """
        try:
            locked = await self.session.execute(
                select(Session.max_participants).where(Session.id == session_id).with_for_update()
            )
            max_participants = locked.scalar_one_or_none()
            if max_participants is None:
                raise StoreError(StoreErrorKind.NOT_FOUND, SESSION_NOT_FOUND)

            existing = await self.session.execute(
                select(SessionParticipant.user_id).where(
                    SessionParticipant.session_id == session_id,
                    SessionParticipant.user_id == user_id,
                )
            )
            if existing.scalar_one_or_none() is not None:
                raise StoreError(StoreErrorKind.ALREADY_JOINED)

            counted = await self.session.execute(
                select(func.count())
                .select_from(SessionParticipant)
                .where(SessionParticipant.session_id == session_id)
            )
            if counted.scalar_one() >= max_participants:
                raise StoreError(StoreErrorKind.SESSION_FULL)

            self.session.add(SessionParticipant(session_id=session_id, user_id=user_id))
            await self.session.commit()
        except StoreError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Duplicate join of session {session_id} by user {user_id}: {e.orig}")
            raise StoreError(StoreErrorKind.ALREADY_JOINED) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(f"Database error joining session {session_id}: {e}")
            raise StoreError(StoreErrorKind.DATABASE) from e

        logger.info(f"User {user_id} joined session {session_id}")

    async def leave_session(self, session_id: UUID, user_id: UUID) -> None:
        result = await self._execute(
            delete(SessionParticipant).where(
                SessionParticipant.session_id == session_id,
                SessionParticipant.user_id == user_id,
            )
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise StoreError(StoreErrorKind.NOT_JOINED)
        await self._commit()
        logger.info(f"User {user_id} left session {session_id}")

    async def _paginate(self, conditions: list, order_by: tuple, limit: int, page: int,
                        base=None) -> tuple[list[Session], int]:
        """Run the count and page queries for a filtered session listing."""
        query = base if base is not None else select(Session)
        if conditions:
            query = query.where(and_(*conditions))

        count_result = await self._execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        total = count_result.scalar_one()

        page_result = await self._execute(
            query.order_by(*order_by).limit(limit).offset(page_offset(limit, page))
        )
        return list(page_result.scalars().all()), total

    async def search_sessions(
        self,
        filters: SessionSearchFilters,
        limit: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
        now: datetime | None = None,
    ) -> tuple[list[Session], int]:
        """One page of matching sessions plus the total match count."""
        return await self._paginate(
            build_search_conditions(filters, now),
            (Session.date_time.asc(), Session.id.asc()),
            limit,
            page,
        )

    async def list_created_sessions(
        self, user_id: UUID, limit: int = DEFAULT_PAGE_SIZE, page: int = 1
    ) -> tuple[list[Session], int]:
        return await self._paginate(
            [Session.creator_id == user_id],
            (Session.date_time.desc(), Session.id.asc()),
            limit,
            page,
        )

    async def list_joined_sessions(
        self,
        user_id: UUID,
        category: str | None = None,
        exclude_past: bool = False,
        limit: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
        now: datetime | None = None,
    ) -> tuple[list[Session], int]:
        base = select(Session).join(
            SessionParticipant, SessionParticipant.session_id == Session.id
        )
        conditions = [SessionParticipant.user_id == user_id]
        if category:
            conditions.append(Session.category == category)
        if exclude_past:
            conditions.append(Session.date_time > (now or datetime.now(timezone.utc)))
        return await self._paginate(
            conditions,
            (Session.date_time.desc(), Session.id.asc()),
            limit,
            page,
            base=base,
        )

    async def recommended_for_user(
        self,
        user: User,
        limit: int = DEFAULT_RECOMMENDATION_LIMIT,
        now: datetime | None = None,
    ) -> list[Session]:
        """Upcoming sessions the user neither created nor joined.

        With skills: sessions in a matching category, soonest first.
        Without: the most recently created sessions.
        """
        joined = select(SessionParticipant.session_id).where(SessionParticipant.user_id == user.id)
        query = select(Session).where(
            Session.date_time > (now or datetime.now(timezone.utc)),
            Session.creator_id != user.id,
            Session.id.not_in(joined),
        )

        skills = [skill for skill in (user.skills or []) if skill]
        if skills:
            query = query.where(Session.category.in_(skills)).order_by(
                Session.date_time.asc(), Session.id.asc()
            )
        else:
            query = query.order_by(Session.created_at.desc(), Session.id.asc())

        result = await self._execute(query.limit(limit))
        return list(result.scalars().all())

    async def recommended_general(
        self, limit: int = DEFAULT_RECOMMENDATION_LIMIT, now: datetime | None = None
    ) -> list[Session]:
        result = await self._execute(
            select(Session)
            .where(Session.date_time > (now or datetime.now(timezone.utc)))
            .order_by(Session.date_time.asc(), Session.id.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def starting_soon(self, horizon: timedelta, now: datetime | None = None) -> list[Session]:
        """Sessions starting after now and no later than now + horizon."""
        now = now or datetime.now(timezone.utc)
        result = await self._execute(
            select(Session)
            .where(Session.date_time > now, Session.date_time <= now + horizon)
            .order_by(Session.date_time.asc())
        )
        return list(result.scalars().all())
