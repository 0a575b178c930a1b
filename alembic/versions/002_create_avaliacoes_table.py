"""create avaliacoes table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 15:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create avaliacoes table for client reviews of completed requests."""
    op.create_table(
        "avaliacoes",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("solicitacao_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("prestador_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("cliente_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("cliente_nome", sa.String(150), nullable=True),
        sa.Column("estrelas", sa.SmallInteger(), nullable=False),
        sa.Column("comentario", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("solicitacao_id", name="uq_avaliacoes_solicitacao_id"),
        sa.CheckConstraint("estrelas BETWEEN 1 AND 5", name="ck_avaliacoes_estrelas"),
    )

    op.create_index("ix_avaliacoes_prestador_id", "avaliacoes", ["prestador_id"])


def downgrade() -> None:
    """Drop avaliacoes table."""
    op.drop_index("ix_avaliacoes_prestador_id", table_name="avaliacoes")
    op.drop_table("avaliacoes")
