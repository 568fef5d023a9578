"""Catalog endpoint tests."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_catalog(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pokemon")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == len(data["pokemon"])
    assert data["pokemon"][0]["name"] == "Bulbasaur"


@pytest.mark.asyncio
async def test_filter_catalog(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pokemon", params={"rarity": "legendary"})
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["pokemon"]] == ["Mewtwo"]


@pytest.mark.asyncio
async def test_filter_rejects_unknown_type(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pokemon", params={"type": "Plasma"})
    assert response.status_code == 422
    assert response.json()["detail"] == "Validation error"


@pytest.mark.asyncio
async def test_get_entry(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pokemon/25")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Pikachu"
    assert data["type"] == "Electric"
    assert data["rarity"] == "rare"
    assert data["stats"]["speed"] == 90
    assert data["stats"]["total"] == 320
    assert {a["name"] for a in data["abilities"]} == {"Static", "Lightning Rod"}


@pytest.mark.asyncio
async def test_get_missing_entry(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pokemon/9999")
    assert response.status_code == 404
    assert response.json() == {"detail": "Pokemon not found"}


@pytest.mark.asyncio
async def test_evolutions(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pokemon/2/evolutions")
    assert response.status_code == 200
    assert [(e["pokemon_from"], e["pokemon_to"]) for e in response.json()] == [(1, 2), (2, 3)]


@pytest.mark.asyncio
async def test_evolutions_for_missing_entry(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pokemon/9999/evolutions")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_request_id_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pokemon/1", headers={"X-Request-Id": "req-123"})
    assert response.headers["X-Request-Id"] == "req-123"
