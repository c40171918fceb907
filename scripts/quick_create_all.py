"""Create all tables for a quick dev setup (NOT for production)."""
from __future__ import annotations

import asyncio

from dotenv import load_dotenv

from bechdel.config import BaseConfig
from bechdel.db.session import db


async def _create() -> None:
    db.init_app(BaseConfig())
    try:
        await db.create_all()
    finally:
        await db.dispose()
    print("Tables created.")


def main() -> None:
    load_dotenv()
    asyncio.run(_create())


if __name__ == "__main__":
    main()
