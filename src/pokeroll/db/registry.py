"""Schema registry: one lookup point for every mapped entity.

Built once when the module is imported, from the declarative metadata.
Keys are the persisted table names.
"""

from __future__ import annotations

from sqlalchemy import Table

from pokeroll.db.base import Base
from pokeroll.db.models import (
    Ability,
    Account,
    Currency,
    Evolution,
    Expedition,
    InventoryPokemon,
    Pokemon,
    PokemonStats,
    PokemonToAbility,
    PokemonToEvolution,
    RouletteLog,
    Session,
    User,
    VerificationToken,
)

IDENTITY_TABLES = ("user", "account", "session", "verificationToken")
ECONOMY_TABLES = ("currency",)
CATALOG_TABLES = ("pokemon", "ability", "pokemonToAbility", "evolution", "pokemonToEvolution", "pokemonStatus")
PLAYER_TABLES = ("rouletteLogs", "inventoryPokemon", "expedition")

ENTITIES: dict[str, type[Base]] = {
    model.__tablename__: model
    for model in (
        User,
        Account,
        Session,
        VerificationToken,
        Currency,
        Pokemon,
        Ability,
        PokemonToAbility,
        Evolution,
        PokemonToEvolution,
        PokemonStats,
        RouletteLog,
        InventoryPokemon,
        Expedition,
    )
}


def get_model(name: str) -> type[Base]:
    """Return the mapped class for a table name. Raises KeyError for unknown names."""
    try:
        return ENTITIES[name]
    except KeyError:
        msg = f"Unknown entity: {name!r}"
        raise KeyError(msg) from None


def get_table(name: str) -> Table:
    """Return the Core table for a table name."""
    return get_model(name).__table__  # type: ignore[return-value]


def primary_key(name: str) -> tuple[str, ...]:
    """Column names forming the primary key, in declaration order."""
    return tuple(col.name for col in get_table(name).primary_key.columns)


def foreign_keys(name: str) -> dict[str, str]:
    """Map each referencing column to its 'table.column' target."""
    return {fk.parent.name: fk.target_fullname for fk in get_table(name).foreign_keys}


def catalog_tables() -> tuple[str, ...]:
    return CATALOG_TABLES


def player_tables() -> tuple[str, ...]:
    """Tables keyed to a user: the identity rows that carry userId, the balance and player state."""
    owned = tuple(name for name in IDENTITY_TABLES if "userId" in get_table(name).c)
    return (*owned, *ECONOMY_TABLES, *PLAYER_TABLES)
