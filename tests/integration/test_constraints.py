"""Storage-level uniqueness, reference and default tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError, StatementError

from pokeroll.db.enums import Role
from pokeroll.db.models import (
    Account,
    Currency,
    Expedition,
    InventoryPokemon,
    Pokemon,
    RouletteLog,
    User,
    VerificationToken,
)

ROLLED_AT = datetime(2026, 10, 19, 9, 30, 0, 123000, tzinfo=timezone.utc)


def _account(user_id: str, provider: str = "github", provider_account_id: str = "12345") -> Account:
    return Account(user_id=user_id, type="oauth", provider=provider, provider_account_id=provider_account_id)


class TestCompositeKeys:
    @pytest.mark.asyncio
    async def test_duplicate_provider_account_rejected(self, db_session, user):
        db_session.add(_account(user.id))
        await db_session.commit()
        db_session.expunge_all()

        db_session.add(_account(user.id))
        with pytest.raises(IntegrityError):
            await db_session.flush()
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_same_account_id_on_other_provider_allowed(self, db_session, user):
        db_session.add_all([_account(user.id, "github"), _account(user.id, "discord")])
        await db_session.commit()

        result = await db_session.execute(select(Account).where(Account.user_id == user.id))
        assert len(result.scalars().all()) == 2

    @pytest.mark.asyncio
    async def test_duplicate_roulette_log_rejected(self, catalog, user):
        db = catalog
        db.add(RouletteLog(user_id=user.id, pokemon_name="Pidgey", time_rolled=ROLLED_AT))
        await db.commit()
        db.expunge_all()

        db.add(RouletteLog(user_id=user.id, pokemon_name="Pidgey", time_rolled=ROLLED_AT))
        with pytest.raises(IntegrityError):
            await db.flush()
        await db.rollback()

    @pytest.mark.asyncio
    async def test_roulette_logs_at_distinct_instants_both_stored(self, catalog, user):
        db = catalog
        db.add_all([
            RouletteLog(user_id=user.id, pokemon_name="Pidgey", time_rolled=ROLLED_AT),
            RouletteLog(user_id=user.id, pokemon_name="Pidgey", time_rolled=ROLLED_AT.replace(microsecond=124000)),
        ])
        await db.commit()

        result = await db.execute(select(RouletteLog).where(RouletteLog.user_id == user.id))
        assert len(result.scalars().all()) == 2

    @pytest.mark.asyncio
    async def test_duplicate_verification_token_rejected(self, db_session):
        expires = datetime(2026, 10, 20, tzinfo=timezone.utc)
        db_session.add(VerificationToken(identifier="ash@example.com", token="abc", expires=expires))
        await db_session.commit()
        db_session.expunge_all()

        db_session.add(VerificationToken(identifier="ash@example.com", token="abc", expires=expires))
        with pytest.raises(IntegrityError):
            await db_session.flush()
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_duplicate_pokemon_name_rejected(self, catalog):
        db = catalog
        db.add(Pokemon(entry=999, name="Pidgey", type="Flying", icon="x.png", rarity="common"))
        with pytest.raises(IntegrityError):
            await db.flush()
        await db.rollback()


class TestReferences:
    @pytest.mark.asyncio
    async def test_account_requires_existing_user(self, db_session):
        db_session.add(_account("no-such-user"))
        with pytest.raises(IntegrityError):
            await db_session.flush()
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_roulette_log_requires_catalog_name(self, catalog, user):
        db = catalog
        db.add(RouletteLog(user_id=user.id, pokemon_name="Missingno", time_rolled=ROLLED_AT))
        with pytest.raises(IntegrityError):
            await db.flush()
        await db.rollback()

    @pytest.mark.asyncio
    async def test_expedition_slots_must_exist(self, catalog, user):
        db = catalog
        owned = InventoryPokemon(user_id=user.id, pokemon_entry=16, shiny=False)
        db.add(owned)
        await db.commit()

        db.add(
            Expedition(
                user_id=user.id,
                slot_one=owned.id,
                slot_two="ghost-1",
                slot_three="ghost-2",
                location=1,
                duration=60,
            )
        )
        with pytest.raises(IntegrityError):
            await db.flush()
        await db.rollback()


class TestDefaults:
    @pytest.mark.asyncio
    async def test_fresh_currency_defaults(self, db_session):
        db_session.add(User(id="u-1", email="brock@example.com"))
        await db_session.flush()
        db_session.add(Currency(user_id="u-1"))
        await db_session.commit()
        db_session.expunge_all()

        currency = (await db_session.execute(select(Currency).where(Currency.user_id == "u-1"))).scalar_one()
        assert currency.cash == 0
        assert currency.dust == 0
        assert currency.num_expeditions_remaining == 3

    @pytest.mark.asyncio
    async def test_server_side_currency_defaults(self, db_session):
        """Rows inserted outside the ORM pick up the same defaults."""
        db_session.add(User(id="u-2", email="gary@example.com"))
        await db_session.commit()
        await db_session.execute(insert(Currency.__table__).values(userId="u-2"))
        await db_session.commit()

        row = (await db_session.execute(select(Currency.__table__).where(Currency.__table__.c.userId == "u-2"))).one()
        assert row.cash == 0
        assert row.dust == 0
        assert row.numExpeditionsRemaining == 3

    @pytest.mark.asyncio
    async def test_user_defaults(self, db_session):
        before = datetime.now(timezone.utc)
        db_session.add(User(id="u-3", email="oak@example.com"))
        await db_session.commit()
        db_session.expunge_all()

        stored = (await db_session.execute(select(User).where(User.id == "u-3"))).scalar_one()
        assert stored.role is Role.USER
        assert stored.email_verified is not None
        assert stored.email_verified.replace(tzinfo=timezone.utc) >= before.replace(microsecond=0)

    @pytest.mark.asyncio
    async def test_inventory_defaults(self, catalog, user):
        db = catalog
        owned = InventoryPokemon(user_id=user.id, pokemon_entry=19, shiny=True)
        db.add(owned)
        await db.commit()
        db.expunge_all()

        stored = (await db.execute(select(InventoryPokemon).where(InventoryPokemon.user_id == user.id))).scalar_one()
        assert len(stored.id) == 36
        assert stored.level == 5
        assert stored.exp == 0
        assert stored.busy is False
        assert stored.shiny is True


class TestEnumColumns:
    @pytest.mark.asyncio
    async def test_enum_round_trips_as_member(self, catalog):
        stored = (await catalog.execute(select(Pokemon).where(Pokemon.entry == 150))).scalar_one()
        assert stored.type.value == "Psychic"
        assert stored.rarity.value == "legendary"

    @pytest.mark.asyncio
    async def test_value_outside_closed_set_rejected(self, db_session):
        db_session.add(Pokemon(entry=1000, name="Glitch", type="Plasma", icon="x.png", rarity="common"))
        with pytest.raises((StatementError, LookupError)):
            await db_session.flush()
        await db_session.rollback()
