#!/usr/bin/env python3
"""
Crea el esquema del foyer a partir de los modelos.

Uso:
    python create_tables.py          # crea las tablas que falten
    python create_tables.py --drop   # borra y recrea todo (¡pierde los datos!)
"""

import argparse
import asyncio

from foyer.db import engine
from foyer.logging_config import logger
from foyer.models import Base


async def main(drop: bool) -> None:
    try:
        async with engine.begin() as conn:
            if drop:
                await conn.run_sync(Base.metadata.drop_all)
                logger.warning("Tables supprimées")
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Tables créées", extra={"tables": sorted(Base.metadata.tables)})
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Crée les tables de la base du foyer")
    parser.add_argument("--drop", action="store_true", help="supprime les tables existantes avant de les recréer")
    asyncio.run(main(parser.parse_args().drop))
