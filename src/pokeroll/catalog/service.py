"""Catalog administration: species, abilities, stats and evolution edges."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pokeroll.db.enums import PokemonType, Rarity
from pokeroll.db.models import (
    Ability,
    Evolution,
    Pokemon,
    PokemonStats,
    PokemonToEvolution,
)

logger = structlog.get_logger()

STAT_FIELDS = ("hp", "attack", "defense", "special_attack", "special_defense", "speed")


async def get_or_create_ability(db: AsyncSession, name: str) -> Ability:
    """Find an ability by name, creating it if missing."""
    result = await db.execute(select(Ability).where(Ability.name == name).order_by(Ability.id))
    ability = result.scalars().first()
    if ability is None:
        ability = Ability(name=name)
        db.add(ability)
        await db.flush()
    return ability


async def add_pokemon(
    db: AsyncSession,
    entry: int,
    name: str,
    type: PokemonType | str,  # noqa: A002
    icon: str,
    rarity: Rarity | str,
    stats: Mapping[str, int] | None = None,
    abilities: Iterable[str] = (),
) -> Pokemon:
    """
    Add a species to the catalog.

    Raises:
        ValueError: If type or rarity is outside its closed set, or the stat
            block is incomplete.
    """
    pokemon = Pokemon(
        entry=entry,
        name=name,
        type=PokemonType(type),
        icon=icon,
        rarity=Rarity(rarity),
    )
    if stats is not None:
        missing = [field for field in STAT_FIELDS if field not in stats]
        if missing:
            msg = f"Missing stats for {name}: {', '.join(missing)}"
            raise ValueError(msg)
        pokemon.stats = PokemonStats(**{field: stats[field] for field in STAT_FIELDS})

    pokemon.abilities = [await get_or_create_ability(db, ability_name) for ability_name in abilities]
    db.add(pokemon)
    await db.flush()
    logger.info("pokemon_added", entry=entry, name=name)
    return pokemon


async def add_evolution(db: AsyncSession, pokemon_from: int, pokemon_to: int | None = None) -> Evolution:
    """Record an evolution edge and register both species as participants."""
    evolution = Evolution(pokemon_from=pokemon_from, pokemon_to=pokemon_to)
    db.add(evolution)
    await db.flush()

    for entry in {pokemon_from, pokemon_to} - {None}:
        db.add(PokemonToEvolution(pokemon_entry=entry, evolution_id=evolution.id))
    await db.flush()
    return evolution


async def get_pokemon(db: AsyncSession, entry: int) -> Pokemon | None:
    """Fetch a species with abilities and stats loaded."""
    result = await db.execute(
        select(Pokemon)
        .where(Pokemon.entry == entry)
        .options(selectinload(Pokemon.abilities), selectinload(Pokemon.stats))
    )
    return result.scalar_one_or_none()


async def get_pokemon_by_name(db: AsyncSession, name: str) -> Pokemon | None:
    result = await db.execute(select(Pokemon).where(Pokemon.name == name))
    return result.scalar_one_or_none()


async def list_pokemon(
    db: AsyncSession,
    rarity: Rarity | None = None,
    type: PokemonType | None = None,  # noqa: A002
) -> list[Pokemon]:
    """List catalog species in dex order, optionally filtered."""
    query = select(Pokemon).options(selectinload(Pokemon.abilities), selectinload(Pokemon.stats))
    if rarity is not None:
        query = query.where(Pokemon.rarity == rarity)
    if type is not None:
        query = query.where(Pokemon.type == type)
    result = await db.execute(query.order_by(Pokemon.entry))
    return list(result.scalars().all())


async def get_evolution_chain(db: AsyncSession, entry: int) -> list[Evolution]:
    """Evolution edges a species is registered against, oldest first."""
    result = await db.execute(
        select(Evolution)
        .join(PokemonToEvolution, PokemonToEvolution.evolution_id == Evolution.id)
        .where(PokemonToEvolution.pokemon_entry == entry)
        .order_by(Evolution.id)
    )
    return list(result.scalars().all())


async def delete_pokemon(db: AsyncSession, entry: int) -> bool:
    """Remove a species; the database cascades to everything that references it."""
    result = await db.execute(delete(Pokemon).where(Pokemon.entry == entry))
    deleted = result.rowcount > 0
    if deleted:
        logger.info("pokemon_deleted", entry=entry)
    return deleted
