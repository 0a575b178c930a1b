"""Database models."""

from sqlalchemy import MetaData

from app.models.avaliacoes import avaliacoes
from app.models.categorias import categorias
from app.models.prestadores import prestadores
from app.models.solicitacoes import solicitacoes
from app.models.users import users

# Every table in one MetaData, for create_all and Alembic autogenerate
metadata = MetaData()
for _table in (users, categorias, prestadores, solicitacoes, avaliacoes):
    _table.to_metadata(metadata)

__all__ = [
    "avaliacoes",
    "categorias",
    "metadata",
    "prestadores",
    "solicitacoes",
    "users",
]
