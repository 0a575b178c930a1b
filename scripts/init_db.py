"""Script to initialize the database and seed default data."""

import asyncio
from uuid import uuid4

from sqlalchemy import func, select

from app.core.security import get_password_hash
from app.database import engine
from app.models import categorias, metadata, users

DEFAULT_CATEGORIES = [
    ("Limpeza", "Sparkles"),
    ("Elétrica", "Zap"),
    ("Hidráulica", "Droplets"),
    ("Pintura", "PaintBucket"),
    ("Jardinagem", "Flower"),
    ("Fretes", "Package"),
]

DEFAULT_ADMIN = {
    "full_name": "Administrador ServiJá",
    "email": "admin@servija.local",
    "password": "admin123",  # pragma: allowlist secret
}


async def init_db() -> None:
    """Create all tables, then seed the admin account and categories if missing."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

        admin = await conn.execute(select(users.c.id).where(users.c.email == DEFAULT_ADMIN["email"]))
        if admin.first() is None:
            await conn.execute(
                users.insert().values(
                    id=uuid4(),
                    full_name=DEFAULT_ADMIN["full_name"],
                    email=DEFAULT_ADMIN["email"],
                    password_hash=get_password_hash(DEFAULT_ADMIN["password"]),
                    tipo="admin",
                    ativo=True,
                )
            )
            print(f"✓ Admin account created: {DEFAULT_ADMIN['email']}")

        category_count = (
            await conn.execute(select(func.count()).select_from(categorias))
        ).scalar_one()
        if category_count == 0:
            await conn.execute(
                categorias.insert(),
                [{"id": uuid4(), "nome": nome, "icone": icone} for nome, icone in DEFAULT_CATEGORIES],
            )
            print(f"✓ Seeded {len(DEFAULT_CATEGORIES)} categories")

    print("✓ Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db())
