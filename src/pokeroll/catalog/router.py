"""Catalog API: read-only species, stats and evolution lookups."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pokeroll.catalog.schemas import EvolutionResponse, PokemonListResponse, PokemonResponse
from pokeroll.catalog.service import get_evolution_chain, get_pokemon, list_pokemon
from pokeroll.database import get_session
from pokeroll.db.enums import PokemonType, Rarity

router = APIRouter(prefix="/api/v1/pokemon", tags=["Catalog"])


@router.get("", response_model=PokemonListResponse)
async def list_catalog(
    rarity: Rarity | None = Query(None),  # noqa: B008
    type: PokemonType | None = Query(None),  # noqa: A002, B008
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> PokemonListResponse:
    """List species in dex order, optionally filtered by rarity and type."""
    pokemon = await list_pokemon(db, rarity=rarity, type=type)
    return PokemonListResponse(
        pokemon=[PokemonResponse.model_validate(p) for p in pokemon],
        total=len(pokemon),
    )


@router.get("/{entry}", response_model=PokemonResponse)
async def get_catalog_entry(
    entry: int,
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> PokemonResponse:
    """Get one species with its abilities and base stats."""
    pokemon = await get_pokemon(db, entry)
    if pokemon is None:
        raise HTTPException(status_code=404, detail="Pokemon not found")
    return PokemonResponse.model_validate(pokemon)


@router.get("/{entry}/evolutions", response_model=list[EvolutionResponse])
async def get_catalog_evolutions(
    entry: int,
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[EvolutionResponse]:
    """Evolution edges the species takes part in."""
    if await get_pokemon(db, entry) is None:
        raise HTTPException(status_code=404, detail="Pokemon not found")
    return [EvolutionResponse.model_validate(e) for e in await get_evolution_chain(db, entry)]
