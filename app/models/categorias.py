"""Service category model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, MetaData, String, Table, Uuid, func, text

metadata = MetaData()

categorias = Table(
    "categorias",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    Column("nome", String(120), nullable=False),
    Column("icone", String(80)),
    Column("ativo", Boolean, nullable=False, server_default=text("true")),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
