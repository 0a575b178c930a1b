"""Tests for Redis caching implementation."""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import UnauthorizedException
from app.core.redis_client import CacheManager
from app.models.prestadores import prestadores
from app.models.solicitacoes import solicitacoes
from app.schemas.avaliacoes import AvaliacaoCreate
from app.schemas.categorias import CategoriaCreate, CategoriaUpdate
from app.services.auth_service import AuthService
from app.services.category_service import CategoryService
from app.services.review_service import ReviewService


def test_cache_manager_get_json():
    """Test CacheManager get_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    # Test cache miss
    mock_redis.get.return_value = None
    result = cache_manager.get_json("test_key")
    assert result is None
    mock_redis.get.assert_called_once_with("test_key")

    # Test cache hit
    mock_redis.reset_mock()
    mock_redis.get.return_value = '[{"nome": "Elétrica", "ativo": true}]'
    result = cache_manager.get_json("test_key")
    assert result == [{"nome": "Elétrica", "ativo": True}]


def test_cache_manager_set_json():
    """Test CacheManager set_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    test_data = {"nome": "Elétrica", "value": 123}

    # Test without TTL
    result = cache_manager.set_json("test_key", test_data)
    assert result is True
    mock_redis.set.assert_called_once()

    # Test with TTL
    mock_redis.reset_mock()
    result = cache_manager.set_json("test_key", test_data, ttl=300)
    assert result is True
    mock_redis.setex.assert_called_once()


def test_cache_manager_delete_pattern():
    """Test CacheManager delete_pattern method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    mock_redis.keys.return_value = ["categoria:list:None:", "categoria:list:True:nome"]
    mock_redis.delete.return_value = 2

    result = cache_manager.delete_pattern("categoria:list:*")

    mock_redis.keys.assert_called_once_with("categoria:list:*")
    assert result == 2


def test_cache_manager_fails_open():
    """A Redis outage degrades to misses instead of raising."""
    mock_redis = MagicMock()
    mock_redis.get.side_effect = RedisConnectionError("down")
    mock_redis.setex.side_effect = RedisConnectionError("down")
    mock_redis.exists.side_effect = RedisConnectionError("down")
    mock_redis.keys.side_effect = RedisConnectionError("down")
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.get_json("k") is None
    assert cache_manager.set("k", "v", ttl=10) is False
    assert cache_manager.exists("k") is False
    assert cache_manager.delete_pattern("k*") == 0


@pytest.mark.asyncio
async def test_category_list_caching(db_session: AsyncSession):
    """Category listings are served from cache and invalidated on writes."""
    mock_redis = MagicMock()
    mock_redis.get.return_value = None
    mock_redis.keys.return_value = ["categoria:list:None:"]
    service = CategoryService(CacheManager(redis_client=mock_redis))

    created = await service.create_category(db_session, CategoriaCreate(nome="Pintura"))
    mock_redis.keys.assert_called_with("categoria:list:*")

    # Miss: query the database and populate the cache
    items = await service.list_categories(db_session)
    assert [item["nome"] for item in items] == ["Pintura"]
    mock_redis.setex.assert_called_once()
    key, ttl, _ = mock_redis.setex.call_args.args
    assert key == "categoria:list:None:"
    assert ttl == CategoryService.CATEGORY_LIST_CACHE_TTL

    # Hit: the cached payload is returned as-is
    mock_redis.get.return_value = '[{"nome": "Cached"}]'
    assert await service.list_categories(db_session) == [{"nome": "Cached"}]

    # Rename invalidates every listing
    mock_redis.reset_mock()
    await service.update_category(db_session, created["id"], CategoriaUpdate(nome="Pintura Fina"))
    mock_redis.keys.assert_called_once_with("categoria:list:*")
    mock_redis.delete.assert_called_once_with("categoria:list:None:")


def test_logout_blacklists_refresh_token():
    """A revoked refresh token can no longer be exchanged."""
    mock_redis = MagicMock()
    mock_redis.exists.return_value = 0
    service = AuthService(CacheManager(redis_client=mock_redis))
    tokens = service.create_tokens("8d2a6a4e-4a53-4a8e-9d6c-3f1f2b7f0a11")

    refreshed = service.refresh_access_token(tokens.refresh_token)
    assert refreshed.access_token

    service.revoke_token(tokens.refresh_token)
    key, ttl, value = mock_redis.setex.call_args.args
    assert key == f"blacklist:{tokens.refresh_token}"
    assert ttl == settings.refresh_token_expire_days * 86400
    assert value == "1"

    mock_redis.exists.return_value = 1
    with pytest.raises(UnauthorizedException):
        service.refresh_access_token(tokens.refresh_token)


def test_revoke_without_cache_is_a_no_op():
    """Logout still succeeds when Redis is not configured."""
    service = AuthService(cache_manager=None)
    tokens = service.create_tokens("8d2a6a4e-4a53-4a8e-9d6c-3f1f2b7f0a11")

    service.revoke_token(tokens.refresh_token)

    assert service.refresh_access_token(tokens.refresh_token).access_token


@pytest.mark.asyncio
async def test_review_list_caching(db_session: AsyncSession):
    """A provider's review list is cached and dropped when a review is added."""
    mock_redis = MagicMock()
    mock_redis.get.return_value = None
    service = ReviewService(CacheManager(redis_client=mock_redis))

    client_id, provider_id, request_id = uuid4(), uuid4(), uuid4()
    await db_session.execute(
        insert(prestadores).values(id=provider_id, nome="Prestador", telefone="11900000000")
    )
    await db_session.execute(
        insert(solicitacoes).values(
            id=request_id,
            cliente_id=client_id,
            cliente_email="cliente@example.com",
            prestador_id=provider_id,
            descricao="Pintar sala",
            status="concluido",
        )
    )
    await db_session.commit()

    assert await service.list_reviews(db_session, provider_id) == []
    key, ttl, _ = mock_redis.setex.call_args.args
    assert key == f"avaliacao:list:{provider_id}"
    assert ttl == ReviewService.REVIEW_LIST_CACHE_TTL

    await service.create_review(
        db_session,
        {"id": client_id, "email": "cliente@example.com", "full_name": "Cliente"},
        AvaliacaoCreate(solicitacao_id=request_id, estrelas=3),
    )
    mock_redis.delete.assert_called_once_with(f"avaliacao:list:{provider_id}")


def test_cache_manager_delete_fails_open():
    mock_redis = MagicMock()
    mock_redis.delete.side_effect = RedisConnectionError("down")

    assert CacheManager(redis_client=mock_redis).delete("k") is False
