"""Player balance operations."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pokeroll.db.models import Currency


class InsufficientFundsError(ValueError):
    """Raised when a debit would take a balance below zero."""


async def get_or_create_currency(db: AsyncSession, user_id: str) -> Currency:
    """Get or create the balance row for a user."""
    result = await db.execute(select(Currency).where(Currency.user_id == user_id))
    currency = result.scalar_one_or_none()
    if currency is None:
        currency = Currency(user_id=user_id)
        db.add(currency)
        await db.flush()
    return currency


async def adjust_currency(
    db: AsyncSession,
    user_id: str,
    cash: float = 0.0,
    dust: float = 0.0,
) -> Currency:
    """Apply signed deltas to a user's cash and dust.

    Raises:
        InsufficientFundsError: If either balance would become negative.
            Nothing is changed in that case.
    """
    currency = await get_or_create_currency(db, user_id)
    new_cash = (currency.cash or 0.0) + cash
    new_dust = (currency.dust or 0.0) + dust
    if new_cash < 0:
        msg = f"Not enough cash: have {currency.cash or 0.0}, need {-cash}"
        raise InsufficientFundsError(msg)
    if new_dust < 0:
        msg = f"Not enough dust: have {currency.dust or 0.0}, need {-dust}"
        raise InsufficientFundsError(msg)

    currency.cash = new_cash
    currency.dust = new_dust
    await db.flush()
    return currency
