"""User directory: accounts, credentials and OAuth identities."""
import logging
from uuid import UUID

from sqlalchemy import select, update, delete

from skillshare.core.errors import StoreError, StoreErrorKind
from skillshare.core.security import hash_token
from skillshare.models.user import User, UserRole, PRIVILEGED_ROLES
from skillshare.services.base import Store

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User with this email already exists"


class OAuthLinkConflict(StoreError):
    """The matching local account is already bound to another external identity."""

    def __init__(self, message: str = "Account is already linked to another OAuth identity"):
        super().__init__(StoreErrorKind.CONFLICT, message)


class UserDirectory(Store):
    """Persistence operations on users."""

    async def get_by_id(self, user_id: UUID) -> User:
        result = await self._execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise StoreError(StoreErrorKind.NOT_FOUND, "User not found")
        return user

    async def get_by_email(self, email: str) -> User | None:
        result = await self._execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_oauth(self, provider: str, oauth_id: str) -> User | None:
        result = await self._execute(
            select(User).where(User.oauth_provider == provider, User.oauth_id == oauth_id)
        )
        return result.scalar_one_or_none()

    async def get_by_refresh_token(self, refresh_token: str) -> User | None:
        result = await self._execute(
            select(User).where(User.refresh_token_hash == hash_token(refresh_token))
        )
        return result.scalar_one_or_none()

    async def list_users(self) -> list[User]:
        result = await self._execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: str,
        bio: str | None = None,
        skills: list[str] | None = None,
        role: str | UserRole | None = None,
    ) -> User:
        """Register a password account.

        Self-registration never grants a privileged role; a requested
        moderator/admin role is downgraded to user.
        """
        if await self.get_by_email(email) is not None:
            raise StoreError(StoreErrorKind.CONFLICT, EMAIL_TAKEN)

        granted = UserRole.USER
        if role:
            try:
                requested = UserRole(role)
            except ValueError:
                requested = UserRole.USER
            if requested in PRIVILEGED_ROLES:
                logger.warning(f"Registration for {email} requested role {requested.value}; using 'user'")

        user = User(
            email=email,
            password_hash=password_hash,
            name=name,
            bio=bio,
            skills=list(skills or []),
            role=granted,
        )
        self.session.add(user)
        await self._commit(conflict_message=EMAIL_TAKEN)
        await self.session.refresh(user)
        logger.info(f"Created user {user.id} ({email})")
        return user

    async def create_oauth_user(self, email: str, name: str, provider: str, oauth_id: str) -> User:
        user = User(
            email=email,
            name=name,
            skills=[],
            role=UserRole.USER,
            oauth_provider=provider,
            oauth_id=oauth_id,
        )
        self.session.add(user)
        await self._commit(conflict_message=EMAIL_TAKEN)
        await self.session.refresh(user)
        logger.info(f"Created {provider} user {user.id} ({email})")
        return user

    async def link_oauth(self, user: User, provider: str, oauth_id: str) -> User:
        """Bind an external identity to an existing account."""
        if user.oauth_provider and user.oauth_provider != provider:
            raise OAuthLinkConflict(f"Account is already linked to {user.oauth_provider}")
        if user.oauth_id and user.oauth_id != oauth_id:
            raise OAuthLinkConflict()

        user.oauth_provider = provider
        user.oauth_id = oauth_id
        await self._commit(conflict_message="OAuth identity is already linked to another account")
        logger.info(f"Linked {provider} identity to user {user.id}")
        return user

    async def find_or_create_oauth_user(
        self, provider: str, oauth_id: str, email: str, name: str | None
    ) -> User:
        """Resolve an external login to a local user, linking or creating as needed."""
        user = await self.get_by_oauth(provider, oauth_id)
        if user is not None:
            return user

        user = await self.get_by_email(email)
        if user is not None:
            return await self.link_oauth(user, provider, oauth_id)

        return await self.create_oauth_user(email, name or email.split("@")[0], provider, oauth_id)

    async def update_profile(
        self,
        user: User,
        name: str | None = None,
        bio: str | None = None,
        skills: list[str] | None = None,
    ) -> User:
        if name is not None:
            user.name = name
        if bio is not None:
            user.bio = bio
        if skills is not None:
            user.skills = list(skills)
        await self._commit()
        await self.session.refresh(user)
        return user

    async def update_password(self, user: User, password_hash: str) -> None:
        user.password_hash = password_hash
        await self._commit()
        logger.info(f"Password updated for user {user.id}")

    async def update_role(self, user_id: UUID, role: UserRole) -> User:
        user = await self.get_by_id(user_id)
        previous = user.role
        user.role = role
        await self._commit()
        await self.session.refresh(user)
        logger.info(f"Role of user {user_id} changed from {previous.value} to {role.value}")
        return user

    async def delete_user(self, user_id: UUID) -> None:
        result = await self._execute(delete(User).where(User.id == user_id))
        if result.rowcount == 0:
            await self.session.rollback()
            raise StoreError(StoreErrorKind.NOT_FOUND, "User not found")
        await self._commit()
        logger.info(f"Deleted user {user_id}")

    async def save_refresh_token(self, user_id: UUID, refresh_token: str) -> None:
        """Store the hash of the user's only active refresh token."""
        await self._execute(
            update(User).where(User.id == user_id).values(refresh_token_hash=hash_token(refresh_token))
        )
        await self._commit()

    async def invalidate_refresh_token(self, user_id: UUID) -> None:
        await self._execute(
            update(User).where(User.id == user_id).values(refresh_token_hash=None)
        )
        await self._commit()
