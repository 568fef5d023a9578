"""
Auth adapter storage.

Persists users, linked provider accounts, login sessions and verification
tokens on behalf of an external authentication provider. Functions flush
but never commit; the caller owns the transaction.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import delete, func, select

from pokeroll.config import get_settings
from pokeroll.db.enums import AccountType
from pokeroll.db.models import Account, Currency, Session, User, VerificationToken

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

ACCOUNT_TOKEN_FIELDS = frozenset(
    {"refresh_token", "access_token", "expires_at", "token_type", "scope", "id_token", "session_state"}
)
USER_UPDATE_FIELDS = frozenset({"name", "email", "email_verified", "image", "role"})


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_expired(expires: datetime, now: datetime | None = None) -> bool:
    return _as_utc(expires) <= (now or datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower().strip()))
    return result.scalars().first()


async def get_user_by_account(db: AsyncSession, provider: str, provider_account_id: str) -> User | None:
    """Resolve the user behind a provider identity."""
    result = await db.execute(
        select(User)
        .join(Account, Account.user_id == User.id)
        .where(Account.provider == provider, Account.provider_account_id == provider_account_id)
    )
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    email: str,
    name: str | None = None,
    image: str | None = None,
    email_verified: datetime | None = None,
    user_id: str | None = None,
) -> User:
    """
    Create a user together with its currency row.

    The currency row takes its column defaults (no cash, no dust, three
    expeditions).
    """
    user = User(email=email.strip(), name=name, image=image)
    if user_id is not None:
        user.id = user_id
    if email_verified is not None:
        user.email_verified = email_verified
    db.add(user)
    await db.flush()

    db.add(Currency(user_id=user.id))
    await db.flush()
    logger.info("user_created", user_id=user.id)
    return user


async def update_user(db: AsyncSession, user_id: str, **fields: Any) -> User:
    """
    Update profile fields on a user.

    Raises:
        ValueError: If the user does not exist or a field is not updatable.
    """
    unknown = set(fields) - USER_UPDATE_FIELDS
    if unknown:
        msg = f"Cannot update user fields: {', '.join(sorted(unknown))}"
        raise ValueError(msg)

    user = await get_user_by_id(db, user_id)
    if user is None:
        msg = "User not found"
        raise ValueError(msg)

    for key, value in fields.items():
        setattr(user, key, value)
    await db.flush()
    return user


async def delete_user(db: AsyncSession, user_id: str) -> bool:
    """Delete a user; the database cascades to every per-user row."""
    result = await db.execute(delete(User).where(User.id == user_id))
    deleted = result.rowcount > 0
    if deleted:
        logger.info("user_deleted", user_id=user_id)
    return deleted


# ---------------------------------------------------------------------------
# Linked accounts
# ---------------------------------------------------------------------------


async def link_account(
    db: AsyncSession,
    user_id: str,
    type: str,  # noqa: A002
    provider: str,
    provider_account_id: str,
    **tokens: Any,
) -> Account:
    """
    Link a provider identity to a user.

    Raises:
        ValueError: On an unknown account type or token field.
        sqlalchemy.exc.IntegrityError: On flush, if the identity is already linked.
    """
    try:
        account_type = AccountType(type)
    except ValueError as e:
        msg = f"Unsupported account type: {type!r}"
        raise ValueError(msg) from e

    unknown = set(tokens) - ACCOUNT_TOKEN_FIELDS
    if unknown:
        msg = f"Unknown account fields: {', '.join(sorted(unknown))}"
        raise ValueError(msg)

    account = Account(
        user_id=user_id,
        type=account_type.value,
        provider=provider,
        provider_account_id=provider_account_id,
        **tokens,
    )
    db.add(account)
    await db.flush()
    logger.info("account_linked", user_id=user_id, provider=provider)
    return account


async def unlink_account(db: AsyncSession, provider: str, provider_account_id: str) -> bool:
    """Remove a provider identity. Returns False when nothing was linked."""
    result = await db.execute(
        delete(Account).where(Account.provider == provider, Account.provider_account_id == provider_account_id)
    )
    return result.rowcount > 0


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


async def create_session(
    db: AsyncSession,
    user_id: str,
    expires: datetime,
    session_token: str | None = None,
) -> Session:
    """Open a login session. A random token is generated when none is given."""
    if session_token is None:
        session_token = secrets.token_urlsafe(get_settings().session_token_bytes)
    session = Session(session_token=session_token, user_id=user_id, expires=expires)
    db.add(session)
    await db.flush()
    return session


async def get_session_and_user(db: AsyncSession, session_token: str) -> tuple[Session, User] | None:
    """
    Look up a session and its owner.

    Expired sessions are deleted and reported as missing.
    """
    result = await db.execute(
        select(Session, User).join(User, Session.user_id == User.id).where(Session.session_token == session_token)
    )
    row = result.one_or_none()
    if row is None:
        return None

    session, user = row
    if _is_expired(session.expires):
        await db.delete(session)
        await db.flush()
        logger.info("session_expired", user_id=user.id)
        return None
    return session, user


async def update_session(db: AsyncSession, session_token: str, expires: datetime) -> Session | None:
    """Extend (or shorten) a session. Returns None for unknown tokens."""
    result = await db.execute(select(Session).where(Session.session_token == session_token))
    session = result.scalar_one_or_none()
    if session is None:
        return None
    session.expires = expires
    await db.flush()
    return session


async def delete_session(db: AsyncSession, session_token: str) -> bool:
    """End a session."""
    result = await db.execute(delete(Session).where(Session.session_token == session_token))
    return result.rowcount > 0


async def purge_expired_sessions(db: AsyncSession, now: datetime | None = None) -> int:
    """Delete all sessions past their expiry. Returns the number removed."""
    result = await db.execute(delete(Session).where(Session.expires <= (now or datetime.now(timezone.utc))))
    return result.rowcount


# ---------------------------------------------------------------------------
# Verification tokens
# ---------------------------------------------------------------------------


async def create_verification_token(
    db: AsyncSession,
    identifier: str,
    expires: datetime,
    token: str | None = None,
) -> VerificationToken:
    """Issue a verification token for an identifier (usually an email address)."""
    if token is None:
        token = secrets.token_urlsafe(get_settings().verification_token_bytes)
    vt = VerificationToken(identifier=identifier, token=token, expires=expires)
    db.add(vt)
    await db.flush()
    return vt


async def use_verification_token(db: AsyncSession, identifier: str, token: str) -> VerificationToken | None:
    """
    Consume a verification token.

    The row is deleted whether or not it has expired; an expired token
    returns None.
    """
    result = await db.execute(
        select(VerificationToken).where(
            VerificationToken.identifier == identifier,
            VerificationToken.token == token,
        )
    )
    vt = result.scalar_one_or_none()
    if vt is None:
        return None

    await db.delete(vt)
    await db.flush()
    if _is_expired(vt.expires):
        return None
    return vt
