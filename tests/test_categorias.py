"""Tests for category endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.categorias import categorias
from app.models.prestadores import prestadores


@pytest.mark.asyncio
class TestListCategories:
    """GET /categorias is public."""

    async def test_list_without_auth(self, client: AsyncClient, category: dict):
        response = await client.get("/api/categorias")

        assert response.status_code == 200
        items = response.json()["items"]
        assert [item["nome"] for item in items] == ["Elétrica"]

    async def test_filter_and_sort(self, client: AsyncClient, db_session: AsyncSession):
        await db_session.execute(
            insert(categorias),
            [
                {"id": uuid4(), "nome": "Pintura", "ativo": True},
                {"id": uuid4(), "nome": "Encanamento", "ativo": True},
                {"id": uuid4(), "nome": "Jardinagem", "ativo": False},
            ],
        )
        await db_session.commit()

        active = await client.get("/api/categorias", params={"ativo": "true"})
        inactive = await client.get("/api/categorias", params={"ativo": "false"})
        descending = await client.get("/api/categorias", params={"sort": "-nome"})

        assert [i["nome"] for i in active.json()["items"]] == ["Encanamento", "Pintura"]
        assert [i["nome"] for i in inactive.json()["items"]] == ["Jardinagem"]
        assert [i["nome"] for i in descending.json()["items"]] == [
            "Pintura",
            "Jardinagem",
            "Encanamento",
        ]


@pytest.mark.asyncio
class TestManageCategories:
    """Admin-only category writes."""

    async def test_create(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            "/api/categorias", json={"nome": "  Limpeza "}, headers=admin_headers
        )

        assert response.status_code == 201
        item = response.json()["item"]
        assert item["nome"] == "Limpeza"
        assert item["icone"] == "User"
        assert item["ativo"] is True

    async def test_create_requires_name(self, client: AsyncClient, admin_headers: dict):
        response = await client.post("/api/categorias", json={"nome": ""}, headers=admin_headers)

        assert response.status_code == 400

    async def test_create_requires_admin(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/categorias", json={"nome": "X"}, headers=auth_headers)

        assert response.status_code == 403

    async def test_rename_propagates_to_providers(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        category: dict,
        admin_headers: dict,
    ):
        provider_id = uuid4()
        await db_session.execute(
            insert(prestadores).values(
                id=provider_id,
                nome="Prestador",
                telefone="11900000000",
                categoria_id=category["id"],
                categoria_nome=category["nome"],
            )
        )
        await db_session.commit()

        response = await client.patch(
            f"/api/categorias/{category['id']}",
            json={"nome": "Elétrica Residencial"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["item"]["nome"] == "Elétrica Residencial"
        result = await db_session.execute(
            select(prestadores.c.categoria_nome).where(prestadores.c.id == provider_id)
        )
        assert result.scalar_one() == "Elétrica Residencial"

    async def test_update_requires_a_field(
        self, client: AsyncClient, category: dict, admin_headers: dict
    ):
        response = await client.patch(
            f"/api/categorias/{category['id']}", json={}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No valid field to update"

    async def test_update_unknown(self, client: AsyncClient, admin_headers: dict):
        response = await client.patch(
            f"/api/categorias/{uuid4()}", json={"ativo": False}, headers=admin_headers
        )

        assert response.status_code == 404

    async def test_delete_unused(
        self, client: AsyncClient, category: dict, admin_headers: dict
    ):
        response = await client.delete(f"/api/categorias/{category['id']}", headers=admin_headers)

        assert response.status_code == 204
        listing = await client.get("/api/categorias")
        assert listing.json()["items"] == []

    async def test_delete_in_use_conflicts(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        category: dict,
        admin_headers: dict,
    ):
        await db_session.execute(
            insert(prestadores).values(
                id=uuid4(),
                nome="Prestador",
                telefone="11900000000",
                categoria_id=category["id"],
            )
        )
        await db_session.commit()

        response = await client.delete(f"/api/categorias/{category['id']}", headers=admin_headers)

        assert response.status_code == 409

    async def test_delete_unknown(self, client: AsyncClient, admin_headers: dict):
        response = await client.delete(f"/api/categorias/{uuid4()}", headers=admin_headers)

        assert response.status_code == 404
