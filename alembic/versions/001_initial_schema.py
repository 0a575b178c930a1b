"""Create users, categorias, prestadores and solicitacoes tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _address(with_complement: bool) -> list[sa.Column]:
    columns = [
        sa.Column("rua", sa.String(150), nullable=True),
        sa.Column("numero", sa.String(20), nullable=True),
    ]
    if with_complement:
        columns.append(sa.Column("complemento", sa.String(150), nullable=True))
    columns += [
        sa.Column("bairro", sa.String(120), nullable=True),
        sa.Column("cidade", sa.String(120), nullable=True),
        sa.Column("estado", sa.String(2), nullable=True),
        sa.Column("cep", sa.String(12), nullable=True),
    ]
    return columns


def upgrade() -> None:
    """Create the marketplace tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(191), nullable=False),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("tipo", sa.String(20), nullable=False, server_default=sa.text("'cliente'")),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("telefone", sa.String(30), nullable=True),
        sa.Column("cpf", sa.String(20), nullable=True),
        sa.Column("cnpj", sa.String(20), nullable=True),
        sa.Column("nome_empresa", sa.String(150), nullable=True),
        sa.Column("data_nascimento", sa.Date(), nullable=True),
        *_address(with_complement=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "categorias",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("nome", sa.String(120), nullable=False),
        sa.Column("icone", sa.String(80), nullable=True),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )

    op.create_table(
        "prestadores",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("user_email", sa.String(191), nullable=True),
        sa.Column("nome", sa.String(150), nullable=False),
        sa.Column("cpf", sa.String(20), nullable=True),
        sa.Column("data_nascimento", sa.Date(), nullable=True),
        sa.Column("telefone", sa.String(30), nullable=False),
        sa.Column("nome_empresa", sa.String(150), nullable=True),
        sa.Column("cnpj", sa.String(20), nullable=True),
        sa.Column("tipo_empresa", sa.String(20), nullable=True),
        sa.Column("categoria_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("categoria_nome", sa.String(120), nullable=True),
        sa.Column("descricao", sa.Text(), nullable=True),
        sa.Column("servicos", sa.JSON(), nullable=True),
        sa.Column("valor_hora", sa.Numeric(10, 2), nullable=True),
        sa.Column("preco_base", sa.Numeric(10, 2), nullable=True),
        sa.Column("tempo_medio_atendimento", sa.String(80), nullable=True),
        sa.Column("dias_disponiveis", sa.String(120), nullable=True),
        sa.Column("horarios_disponiveis", sa.String(120), nullable=True),
        *_address(with_complement=False),
        sa.Column("raio_atendimento", sa.Numeric(8, 2), nullable=True),
        sa.Column("foto", sa.Text(), nullable=True),
        sa.Column("foto_facial", sa.Text(), nullable=True),
        sa.Column("foto_documento", sa.Text(), nullable=True),
        sa.Column("logo_empresa", sa.Text(), nullable=True),
        sa.Column("fotos_trabalhos", sa.JSON(), nullable=True),
        sa.Column("avaliacao", sa.Numeric(3, 2), nullable=False, server_default=sa.text("5.00")),
        sa.Column("destaque", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "status_aprovacao",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pendente'"),
        ),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("latitude", sa.Numeric(10, 7), nullable=True),
        sa.Column("longitude", sa.Numeric(10, 7), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", name="uq_prestadores_user_id"),
    )
    op.create_index("ix_prestadores_user_id", "prestadores", ["user_id"])
    op.create_index("ix_prestadores_user_email", "prestadores", ["user_email"])
    op.create_index("ix_prestadores_categoria_id", "prestadores", ["categoria_id"])
    op.create_index("ix_prestadores_ativo", "prestadores", ["ativo"])

    op.create_table(
        "solicitacoes",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("cliente_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("cliente_email", sa.String(191), nullable=False),
        sa.Column("cliente_nome", sa.String(150), nullable=True),
        sa.Column("prestador_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("prestador_email", sa.String(191), nullable=True),
        sa.Column("prestador_nome", sa.String(150), nullable=True),
        sa.Column("categoria_nome", sa.String(120), nullable=True),
        sa.Column("descricao", sa.Text(), nullable=False),
        sa.Column("preco_proposto", sa.Numeric(10, 2), nullable=True),
        sa.Column("preco_acordado", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'aberto'")),
        sa.Column("resposta_prestador", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_solicitacoes_cliente_id", "solicitacoes", ["cliente_id"])
    op.create_index("ix_solicitacoes_cliente_email", "solicitacoes", ["cliente_email"])
    op.create_index("ix_solicitacoes_prestador_id", "solicitacoes", ["prestador_id"])
    op.create_index("ix_solicitacoes_prestador_email", "solicitacoes", ["prestador_email"])
    op.create_index("ix_solicitacoes_status", "solicitacoes", ["status"])


def downgrade() -> None:
    """Drop the marketplace tables."""
    op.drop_table("solicitacoes")
    op.drop_table("prestadores")
    op.drop_table("categorias")
    op.drop_table("users")
