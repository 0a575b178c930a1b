"""Review (avaliacao) model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    MetaData,
    SmallInteger,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)

metadata = MetaData()

avaliacoes = Table(
    "avaliacoes",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    # One review per completed request
    Column("solicitacao_id", Uuid(as_uuid=True), nullable=False),
    Column("prestador_id", Uuid(as_uuid=True), nullable=False, index=True),
    Column("cliente_id", Uuid(as_uuid=True)),
    Column("cliente_nome", String(150)),
    Column("estrelas", SmallInteger, nullable=False),
    Column("comentario", Text),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    UniqueConstraint("solicitacao_id", name="uq_avaliacoes_solicitacao_id"),
    CheckConstraint("estrelas BETWEEN 1 AND 5", name="ck_avaliacoes_estrelas"),
)
