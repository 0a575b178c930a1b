"""User (identity) model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
)

metadata = MetaData()

ACCOUNT_TYPES = ("cliente", "prestador", "admin")

users = Table(
    "users",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    # Stored trimmed and lowercased; unique across accounts
    Column("email", String(191), nullable=False, unique=True, index=True),
    Column("full_name", String(150), nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("avatar", Text),
    Column("tipo", String(20), nullable=False, server_default=text("'cliente'")),
    # Only meaningful for tipo = 'prestador'
    Column("ativo", Boolean, nullable=False, server_default=text("true")),
    # Contact and documents
    Column("telefone", String(30)),
    Column("cpf", String(20)),
    Column("cnpj", String(20)),
    Column("nome_empresa", String(150)),
    Column("data_nascimento", Date),
    # Address
    Column("rua", String(150)),
    Column("numero", String(20)),
    Column("complemento", String(150)),
    Column("bairro", String(120)),
    Column("cidade", String(120)),
    Column("estado", String(2)),
    Column("cep", String(12)),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
