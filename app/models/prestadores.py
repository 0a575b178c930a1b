"""Provider (prestador) business profile model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    text,
)

metadata = MetaData()

APPROVAL_STATUSES = ("pendente", "aprovado", "reprovado")

prestadores = Table(
    "prestadores",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    # Soft owner pointer: no FK, legacy rows may only carry the email.
    # Kept aligned with users.id/users.email by the ownership reconciler.
    Column("user_id", Uuid(as_uuid=True), index=True),
    Column("user_email", String(191), index=True),
    # Copied from the owning identity
    Column("nome", String(150), nullable=False),
    Column("cpf", String(20)),
    Column("data_nascimento", Date),
    Column("telefone", String(30), nullable=False),
    Column("nome_empresa", String(150)),
    Column("cnpj", String(20)),
    # Business attributes
    Column("tipo_empresa", String(20)),
    Column("categoria_id", Uuid(as_uuid=True), index=True),
    Column("categoria_nome", String(120)),
    Column("descricao", Text),
    Column("servicos", JSON),
    Column("valor_hora", Numeric(10, 2)),
    Column("preco_base", Numeric(10, 2)),
    Column("tempo_medio_atendimento", String(80)),
    Column("dias_disponiveis", String(120)),
    Column("horarios_disponiveis", String(120)),
    # Address
    Column("rua", String(150)),
    Column("numero", String(20)),
    Column("bairro", String(120)),
    Column("cidade", String(120)),
    Column("estado", String(2)),
    Column("cep", String(12)),
    Column("raio_atendimento", Numeric(8, 2)),
    # Photos
    Column("foto", Text),
    Column("foto_facial", Text),
    Column("foto_documento", Text),
    Column("logo_empresa", Text),
    Column("fotos_trabalhos", JSON),
    # Curation
    Column("avaliacao", Numeric(3, 2), nullable=False, server_default=text("5.00")),
    Column("destaque", Boolean, nullable=False, server_default=text("false")),
    Column(
        "status_aprovacao",
        String(20),
        nullable=False,
        server_default=text("'pendente'"),
    ),
    Column("ativo", Boolean, nullable=False, server_default=text("true"), index=True),
    Column("latitude", Numeric(10, 7)),
    Column("longitude", Numeric(10, 7)),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    # NULLs are distinct, so legacy email-only rows are unaffected
    UniqueConstraint("user_id", name="uq_prestadores_user_id"),
)
