"""API router configuration."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    avaliacoes,
    categorias,
    health,
    prestadores,
    profile,
    solicitacoes,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(profile.router)
api_router.include_router(categorias.router)
api_router.include_router(prestadores.router)
api_router.include_router(solicitacoes.router)
api_router.include_router(avaliacoes.router)
api_router.include_router(users.router)
