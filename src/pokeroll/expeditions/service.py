"""Expedition bookkeeping: committing and releasing three inventory slots.

Outcomes and rewards are decided elsewhere; this module only keeps the
slot, busy-flag and allowance state consistent. Everything happens inside
the caller's transaction.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pokeroll.db.models import Expedition, InventoryPokemon
from pokeroll.users.service import get_or_create_currency

logger = structlog.get_logger()

SLOT_COUNT = 3


class ExpeditionError(ValueError):
    """Base class for expedition rule violations."""


class SlotUnavailableError(ExpeditionError):
    """A slot is missing, owned by someone else, or already busy."""


class NoExpeditionsRemainingError(ExpeditionError):
    """The player has used up their expedition allowance."""


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _validate_slots(slots: Sequence[str]) -> tuple[str, str, str]:
    if len(slots) != SLOT_COUNT:
        msg = f"An expedition needs exactly {SLOT_COUNT} pokemon, got {len(slots)}"
        raise ExpeditionError(msg)
    if len(set(slots)) != SLOT_COUNT:
        msg = "Expedition slots must hold three different pokemon"
        raise ExpeditionError(msg)
    return slots[0], slots[1], slots[2]


async def start_expedition(
    db: AsyncSession,
    user_id: str,
    slots: Sequence[str],
    location: int,
    duration: int,
    time_started: datetime | None = None,
) -> Expedition:
    """
    Send three owned pokemon on an expedition.

    Marks each slot busy, spends one expedition from the allowance and
    inserts the expedition row.

    Raises:
        ExpeditionError: Wrong slot count, repeated slots or a non-positive duration.
        SlotUnavailableError: A slot is not the player's or is already busy.
        NoExpeditionsRemainingError: The allowance is exhausted.
    """
    slot_one, slot_two, slot_three = _validate_slots(slots)
    if duration <= 0:
        msg = "Expedition duration must be positive"
        raise ExpeditionError(msg)

    result = await db.execute(
        select(InventoryPokemon).where(
            InventoryPokemon.id.in_([slot_one, slot_two, slot_three]),
            InventoryPokemon.user_id == user_id,
        )
    )
    members = {p.id: p for p in result.scalars().all()}
    missing = [slot for slot in (slot_one, slot_two, slot_three) if slot not in members]
    if missing:
        msg = f"Not in this inventory: {', '.join(missing)}"
        raise SlotUnavailableError(msg)
    busy = [slot for slot, p in members.items() if p.busy]
    if busy:
        msg = f"Already busy: {', '.join(sorted(busy))}"
        raise SlotUnavailableError(msg)

    currency = await get_or_create_currency(db, user_id)
    remaining = currency.num_expeditions_remaining or 0
    if remaining <= 0:
        msg = "No expeditions remaining"
        raise NoExpeditionsRemainingError(msg)

    for member in members.values():
        member.busy = True
    currency.num_expeditions_remaining = remaining - 1

    expedition = Expedition(
        user_id=user_id,
        slot_one=slot_one,
        slot_two=slot_two,
        slot_three=slot_three,
        location=location,
        duration=duration,
        time_started=time_started or datetime.now(timezone.utc),
    )
    db.add(expedition)
    await db.flush()
    logger.info("expedition_started", user_id=user_id, location=location, duration=duration)
    return expedition


async def list_expeditions(db: AsyncSession, user_id: str) -> list[Expedition]:
    """A player's expeditions, oldest first."""
    result = await db.execute(
        select(Expedition).where(Expedition.user_id == user_id).order_by(Expedition.time_started)
    )
    return list(result.scalars().all())


def expedition_ends_at(expedition: Expedition) -> datetime:
    """Start time plus duration (seconds)."""
    return _as_utc(expedition.time_started) + timedelta(seconds=expedition.duration)


def is_complete(expedition: Expedition, now: datetime | None = None) -> bool:
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    return now >= expedition_ends_at(expedition)


async def finish_expedition(db: AsyncSession, user_id: str, slots: Sequence[str]) -> bool:
    """
    Close an expedition and free its slots.

    Returns False when no expedition matches. Does not check whether the
    duration has elapsed; call is_complete first to enforce that.
    """
    slot_one, slot_two, slot_three = _validate_slots(slots)
    result = await db.execute(
        select(Expedition).where(
            Expedition.user_id == user_id,
            Expedition.slot_one == slot_one,
            Expedition.slot_two == slot_two,
            Expedition.slot_three == slot_three,
        )
    )
    expedition = result.scalar_one_or_none()
    if expedition is None:
        return False

    members = await db.execute(
        select(InventoryPokemon).where(InventoryPokemon.id.in_([slot_one, slot_two, slot_three]))
    )
    for member in members.scalars().all():
        member.busy = False
    await db.delete(expedition)
    await db.flush()
    logger.info("expedition_finished", user_id=user_id)
    return True
