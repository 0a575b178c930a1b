"""Tests for review endpoints and the derived provider rating."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.avaliacoes import avaliacoes
from app.models.prestadores import prestadores
from app.models.solicitacoes import solicitacoes
from conftest import create_user, headers_for


@pytest.fixture
async def provider_profile(db_session: AsyncSession, provider_user: dict) -> dict:
    """A provider profile with the default rating."""
    row = {
        "id": uuid4(),
        "user_id": provider_user["id"],
        "user_email": provider_user["email"],
        "nome": provider_user["full_name"],
        "telefone": provider_user["telefone"],
    }
    await db_session.execute(insert(prestadores).values(**row))
    await db_session.commit()
    return row


async def add_request(
    db_session: AsyncSession, client_user: dict, provider: dict, status: str = "concluido"
) -> dict:
    row = {
        "id": uuid4(),
        "cliente_id": client_user["id"],
        "cliente_email": client_user["email"],
        "cliente_nome": client_user["full_name"],
        "prestador_id": provider["id"],
        "prestador_email": provider["user_email"],
        "descricao": "Trocar disjuntor",
        "status": status,
    }
    await db_session.execute(insert(solicitacoes).values(**row))
    await db_session.commit()
    return row


async def provider_rating(db_session: AsyncSession, provider_id) -> float:
    result = await db_session.execute(
        select(prestadores.c.avaliacao).where(prestadores.c.id == provider_id)
    )
    return float(result.scalar_one())


@pytest.mark.asyncio
class TestCreateReview:
    """POST /avaliacoes."""

    async def test_review_recomputes_provider_rating(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        auth_headers: dict,
        provider_profile: dict,
    ):
        first = await add_request(db_session, test_user, provider_profile)
        second = await add_request(db_session, test_user, provider_profile)

        created = await client.post(
            "/api/avaliacoes",
            json={"solicitacao_id": str(first["id"]), "estrelas": 5, "comentario": " Ótimo "},
            headers=auth_headers,
        )
        assert created.status_code == 201
        item = created.json()["item"]
        assert item["prestador_id"] == str(provider_profile["id"])
        assert item["cliente_id"] == str(test_user["id"])
        assert item["cliente_nome"] == test_user["full_name"]
        assert item["comentario"] == "Ótimo"
        assert await provider_rating(db_session, provider_profile["id"]) == 5.0

        await client.post(
            "/api/avaliacoes",
            json={"solicitacao_id": str(second["id"]), "estrelas": "4"},
            headers=auth_headers,
        )

        assert await provider_rating(db_session, provider_profile["id"]) == 4.5
        listed = await client.get("/api/prestadores", params={"id": str(provider_profile["id"])})
        assert listed.json()["items"][0]["avaliacao"] == 4.5

    async def test_second_review_of_same_request_conflicts(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        auth_headers: dict,
        provider_profile: dict,
    ):
        request = await add_request(db_session, test_user, provider_profile)
        payload = {"solicitacao_id": str(request["id"]), "estrelas": 2}

        first = await client.post("/api/avaliacoes", json=payload, headers=auth_headers)
        second = await client.post(
            "/api/avaliacoes", json={**payload, "estrelas": 5}, headers=auth_headers
        )

        assert first.status_code == 201
        assert second.status_code == 409
        assert await provider_rating(db_session, provider_profile["id"]) == 2.0

    async def test_only_completed_requests(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        auth_headers: dict,
        provider_profile: dict,
    ):
        request = await add_request(db_session, test_user, provider_profile, status="aceito")

        response = await client.post(
            "/api/avaliacoes",
            json={"solicitacao_id": str(request["id"]), "estrelas": 3},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Only completed requests can be reviewed"
        assert await provider_rating(db_session, provider_profile["id"]) == 5.0

    async def test_only_the_client_may_review(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        provider_headers: dict,
        provider_profile: dict,
    ):
        request = await add_request(db_session, test_user, provider_profile)
        stranger = await create_user(db_session, email="outro@example.com")

        as_provider = await client.post(
            "/api/avaliacoes",
            json={"solicitacao_id": str(request["id"]), "estrelas": 5},
            headers=provider_headers,
        )
        as_stranger = await client.post(
            "/api/avaliacoes",
            json={"solicitacao_id": str(request["id"]), "estrelas": 5},
            headers=headers_for(stranger),
        )

        assert as_provider.status_code == 403
        assert as_stranger.status_code == 403

    async def test_client_matched_by_normalized_email(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        auth_headers: dict,
        provider_profile: dict,
    ):
        request = await add_request(
            db_session, {**test_user, "id": None, "email": " CLIENTE@example.com"}, provider_profile
        )

        response = await client.post(
            "/api/avaliacoes",
            json={"solicitacao_id": str(request["id"]), "estrelas": 4},
            headers=auth_headers,
        )

        assert response.status_code == 201

    @pytest.mark.parametrize("estrelas", [0, 6, 4.5, None])
    async def test_stars_must_be_whole_between_one_and_five(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        auth_headers: dict,
        provider_profile: dict,
        estrelas,
    ):
        request = await add_request(db_session, test_user, provider_profile)

        response = await client.post(
            "/api/avaliacoes",
            json={"solicitacao_id": str(request["id"]), "estrelas": estrelas},
            headers=auth_headers,
        )

        assert response.status_code == 400

    async def test_missing_and_unknown_request(self, client: AsyncClient, auth_headers: dict):
        missing = await client.post("/api/avaliacoes", json={"estrelas": 5}, headers=auth_headers)
        unknown = await client.post(
            "/api/avaliacoes",
            json={"solicitacao_id": str(uuid4()), "estrelas": 5},
            headers=auth_headers,
        )

        assert missing.status_code == 400
        assert unknown.status_code == 404

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.post(
            "/api/avaliacoes", json={"solicitacao_id": str(uuid4()), "estrelas": 5}
        )

        assert response.status_code == 401


@pytest.mark.asyncio
class TestReadReviews:
    """GET /avaliacoes and GET /avaliacoes/solicitacao/{id} are public."""

    async def test_list_by_provider_newest_first(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        provider_id = uuid4()
        for estrelas, day in ((3, 1), (5, 3), (4, 2)):
            await db_session.execute(
                insert(avaliacoes).values(
                    id=uuid4(),
                    solicitacao_id=uuid4(),
                    prestador_id=provider_id,
                    estrelas=estrelas,
                    created_at=datetime(2026, 1, day, tzinfo=UTC),
                )
            )
        await db_session.execute(
            insert(avaliacoes).values(
                id=uuid4(), solicitacao_id=uuid4(), prestador_id=uuid4(), estrelas=1
            )
        )
        await db_session.commit()

        response = await client.get("/api/avaliacoes", params={"prestador_id": str(provider_id)})

        assert response.status_code == 200
        assert [item["estrelas"] for item in response.json()["items"]] == [5, 4, 3]

    async def test_list_requires_provider(self, client: AsyncClient):
        response = await client.get("/api/avaliacoes")

        assert response.status_code == 400
        assert response.json()["message"] == "prestador_id is required"

    async def test_review_of_request(self, client: AsyncClient, db_session: AsyncSession):
        solicitacao_id = uuid4()
        await db_session.execute(
            insert(avaliacoes).values(
                id=uuid4(), solicitacao_id=solicitacao_id, prestador_id=uuid4(), estrelas=4
            )
        )
        await db_session.commit()

        found = await client.get(f"/api/avaliacoes/solicitacao/{solicitacao_id}")
        missing = await client.get(f"/api/avaliacoes/solicitacao/{uuid4()}")

        assert found.json()["item"]["estrelas"] == 4
        assert missing.status_code == 200
        assert missing.json() == {"item": None}
