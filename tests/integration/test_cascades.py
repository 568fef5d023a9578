"""Referential cascade tests: deleting a parent leaves no orphans."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from pokeroll.auth.service import create_session, delete_user, link_account
from pokeroll.catalog.service import delete_pokemon
from pokeroll.db.models import (
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
)
from pokeroll.expeditions.service import start_expedition
from pokeroll.inventory.service import record_roll


async def _count(db, model, *where) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*where))
    return result.scalar_one()


async def _populate_player(db, user_id: str) -> list[str]:
    """Give a player an account, a session, three pokemon and an expedition."""
    await link_account(db, user_id, "oauth", "discord", f"discord-{user_id}")
    await create_session(db, user_id, datetime.now(timezone.utc) + timedelta(days=1))
    start = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)
    owned = []
    for i, entry in enumerate((1, 4, 7)):
        _, inv = await record_roll(db, user_id, entry, time_rolled=start + timedelta(seconds=i))
        owned.append(inv.id)
    await start_expedition(db, user_id, owned, location=1, duration=3600)
    await db.commit()
    return owned


class TestUserCascade:
    @pytest.mark.asyncio
    async def test_deleting_user_removes_all_player_rows(self, catalog, user):
        db = catalog
        await _populate_player(db, user.id)

        assert await _count(db, Account, Account.user_id == user.id) == 1
        assert await _count(db, Expedition, Expedition.user_id == user.id) == 1

        assert await delete_user(db, user.id) is True
        await db.commit()

        for model in (Account, Session, Currency, InventoryPokemon, Expedition, RouletteLog):
            assert await _count(db, model, model.user_id == user.id) == 0, model.__tablename__
        assert await _count(db, User, User.id == user.id) == 0

    @pytest.mark.asyncio
    async def test_other_players_untouched(self, catalog, user):
        from pokeroll.auth.service import create_user

        db = catalog
        other = await create_user(db, "misty@example.com", name="Misty")
        await db.commit()
        await _populate_player(db, user.id)
        await _populate_player(db, other.id)

        await delete_user(db, user.id)
        await db.commit()

        assert await _count(db, InventoryPokemon, InventoryPokemon.user_id == other.id) == 3
        assert await _count(db, Expedition, Expedition.user_id == other.id) == 1
        assert await _count(db, Currency, Currency.user_id == other.id) == 1

    @pytest.mark.asyncio
    async def test_catalog_survives_user_deletion(self, catalog, user):
        db = catalog
        await _populate_player(db, user.id)
        before = await _count(db, PokemonStats)

        await delete_user(db, user.id)
        await db.commit()

        assert await _count(db, PokemonStats) == before


class TestPokemonCascade:
    @pytest.mark.asyncio
    async def test_deleting_pokemon_removes_dependents(self, catalog, user):
        db = catalog
        await record_roll(db, user.id, 25, time_rolled=datetime(2026, 10, 1, tzinfo=timezone.utc))
        await db.commit()

        assert await _count(db, PokemonToAbility, PokemonToAbility.pokemon_entry == 25) == 2
        assert await _count(db, PokemonStats, PokemonStats.pokemon_entry == 25) == 1

        assert await delete_pokemon(db, 25) is True
        await db.commit()

        assert await _count(db, PokemonToAbility, PokemonToAbility.pokemon_entry == 25) == 0
        assert await _count(db, PokemonToEvolution, PokemonToEvolution.pokemon_entry == 25) == 0
        assert await _count(db, PokemonStats, PokemonStats.pokemon_entry == 25) == 0
        assert await _count(db, InventoryPokemon, InventoryPokemon.pokemon_entry == 25) == 0
        assert await _count(db, RouletteLog, RouletteLog.pokemon_name == "Pikachu") == 0
        assert await _count(db, Evolution, Evolution.pokemon_from == 25) == 0
        # Raichu's terminal edge is unaffected
        assert await _count(db, Evolution, Evolution.pokemon_from == 26) == 1

    @pytest.mark.asyncio
    async def test_deleting_pokemon_cascades_through_inventory_to_expeditions(self, catalog, user):
        db = catalog
        await _populate_player(db, user.id)

        await delete_pokemon(db, 4)
        await db.commit()

        assert await _count(db, Expedition, Expedition.user_id == user.id) == 0
        assert await _count(db, InventoryPokemon, InventoryPokemon.user_id == user.id) == 2

    @pytest.mark.asyncio
    async def test_deleting_evolution_target_removes_edge(self, catalog):
        db = catalog
        await delete_pokemon(db, 3)
        await db.commit()

        edges = select(Evolution.pokemon_from, Evolution.pokemon_to).where(Evolution.pokemon_from == 2)
        result = await db.execute(edges)
        assert result.all() == []
        assert await _count(db, Evolution, Evolution.pokemon_from == 1) == 1

    @pytest.mark.asyncio
    async def test_orm_delete_of_target_drops_loaded_edges(self, catalog):
        db = catalog
        result = await db.execute(
            select(Pokemon).where(Pokemon.entry == 3).options(selectinload(Pokemon.evolves_from))
        )
        venusaur = result.scalar_one()
        assert [e.pokemon_from for e in venusaur.evolves_from] == [2]

        await db.delete(venusaur)
        await db.commit()

        edges = select(Evolution.pokemon_from, Evolution.pokemon_to).where(Evolution.pokemon_from == 2)
        result = await db.execute(edges)
        assert result.all() == []
        assert await _count(db, Evolution, Evolution.pokemon_from == 3) == 0

    @pytest.mark.asyncio
    async def test_orm_delete_of_source_drops_loaded_edges(self, catalog):
        db = catalog
        result = await db.execute(
            select(Pokemon)
            .where(Pokemon.entry == 1)
            .options(selectinload(Pokemon.evolves_into), selectinload(Pokemon.evolves_from))
        )
        bulbasaur = result.scalar_one()
        assert [e.pokemon_to for e in bulbasaur.evolves_into] == [2]

        await db.delete(bulbasaur)
        await db.commit()

        assert await _count(db, Evolution, Evolution.pokemon_from == 1) == 0
        assert await _count(db, PokemonToEvolution, PokemonToEvolution.pokemon_entry == 1) == 0
        # Ivysaur keeps its own edge
        assert await _count(db, Evolution, Evolution.pokemon_from == 2) == 1

    @pytest.mark.asyncio
    async def test_unknown_entry_reports_false(self, catalog):
        assert await delete_pokemon(catalog, 9999) is False
