"""Service request (solicitacao) model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
)

metadata = MetaData()

REQUEST_STATUSES = ("aberto", "aceito", "concluido", "cancelado")

solicitacoes = Table(
    "solicitacoes",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    # Client snapshot taken at creation time
    Column("cliente_id", Uuid(as_uuid=True), index=True),
    Column("cliente_email", String(191), nullable=False, index=True),
    Column("cliente_nome", String(150)),
    # Provider snapshot taken at creation time
    Column("prestador_id", Uuid(as_uuid=True), nullable=False, index=True),
    Column("prestador_email", String(191), index=True),
    Column("prestador_nome", String(150)),
    Column("categoria_nome", String(120)),
    # Request details
    Column("descricao", Text, nullable=False),
    Column("preco_proposto", Numeric(10, 2)),
    Column("preco_acordado", Numeric(10, 2)),
    Column("status", String(20), nullable=False, server_default=text("'aberto'"), index=True),
    Column("resposta_prestador", Text),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
