"""Roulette draw log and owned-pokemon inventory."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pokeroll.db.models import InventoryPokemon, Pokemon, RouletteLog

logger = structlog.get_logger()


class InventoryError(ValueError):
    """Base class for inventory rule violations."""


class UnknownPokemonError(InventoryError):
    """The requested catalog entry does not exist."""


class PokemonNotOwnedError(InventoryError):
    """The inventory id is unknown or belongs to another player."""


class PokemonBusyError(InventoryError):
    """The instance is currently committed to an activity."""


async def record_roll(
    db: AsyncSession,
    user_id: str,
    pokemon_entry: int,
    shiny: bool = False,
    time_rolled: datetime | None = None,
) -> tuple[RouletteLog, InventoryPokemon]:
    """
    Persist the outcome of a roulette draw.

    Appends a log row naming the drawn species and gives the player a new
    inventory instance of it. Choosing the species is the caller's job.

    Raises:
        UnknownPokemonError: If the entry is not in the catalog.
    """
    pokemon = await db.get(Pokemon, pokemon_entry)
    if pokemon is None:
        msg = f"No catalog entry {pokemon_entry}"
        raise UnknownPokemonError(msg)

    log = RouletteLog(
        user_id=user_id,
        pokemon_name=pokemon.name,
        time_rolled=time_rolled or datetime.now(timezone.utc),
    )
    owned = InventoryPokemon(user_id=user_id, pokemon_entry=pokemon.entry, shiny=shiny)
    db.add_all([log, owned])
    await db.flush()
    logger.info("roulette_roll", user_id=user_id, pokemon=pokemon.name, shiny=shiny, inventory_id=owned.id)
    return log, owned


async def list_roulette_logs(db: AsyncSession, user_id: str, limit: int = 50) -> list[RouletteLog]:
    """Most recent draws first."""
    result = await db.execute(
        select(RouletteLog)
        .where(RouletteLog.user_id == user_id)
        .order_by(RouletteLog.time_rolled.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_inventory(db: AsyncSession, user_id: str) -> list[InventoryPokemon]:
    """All instances a player owns, with their species loaded."""
    result = await db.execute(
        select(InventoryPokemon)
        .where(InventoryPokemon.user_id == user_id)
        .options(selectinload(InventoryPokemon.pokemon))
        .order_by(InventoryPokemon.pokemon_entry, InventoryPokemon.id)
    )
    return list(result.scalars().all())


async def get_inventory_pokemon(db: AsyncSession, user_id: str, inventory_id: str) -> InventoryPokemon:
    """
    Fetch one owned instance.

    Raises:
        PokemonNotOwnedError: If it does not exist or belongs to someone else.
    """
    result = await db.execute(
        select(InventoryPokemon).where(
            InventoryPokemon.id == inventory_id,
            InventoryPokemon.user_id == user_id,
        )
    )
    owned = result.scalar_one_or_none()
    if owned is None:
        msg = f"Pokemon {inventory_id} is not in this inventory"
        raise PokemonNotOwnedError(msg)
    return owned


async def release_pokemon(db: AsyncSession, user_id: str, inventory_id: str) -> None:
    """
    Remove an owned instance.

    Raises:
        PokemonNotOwnedError: If the instance is not the player's.
        PokemonBusyError: If it is flagged busy.
    """
    owned = await get_inventory_pokemon(db, user_id, inventory_id)
    if owned.busy:
        msg = f"Pokemon {inventory_id} is busy"
        raise PokemonBusyError(msg)
    await db.delete(owned)
    await db.flush()
    logger.info("pokemon_released", user_id=user_id, inventory_id=inventory_id)
