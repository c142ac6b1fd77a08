#!/usr/bin/env python3
"""
Script para crear la cuenta inicial del back office.

Uso:
    python create_admin.py                                   # admin@example.com / admin123, rol admin
    python create_admin.py --email jefe@foyer.ma --password secreto --role superadmin
"""

import argparse
import asyncio

from sqlalchemy import select

from foyer.db import AsyncSessionLocal, engine
from foyer.models import User
from foyer.schemas import UserCreate
from foyer.services.user_service import UserService

async def create_admin(name: str, email: str, password: str, role: str):
    try:
        async with AsyncSessionLocal() as session:
            payload = UserCreate(name=name, email=email, password=password, role=role)
            existing = await session.scalar(select(User).where(User.email == payload.email))
            if existing:
                print(f"ℹ️  La cuenta {payload.email} ya existe (rol {existing.role})")
                return

            user = await UserService.create(session, payload)
            print("✅ Cuenta creada")
            print(f"- Nombre: {user.name}")
            print(f"- Email: {user.email}")
            print(f"- Rol: {user.role}")

    finally:
        await engine.dispose()

def main():
    parser = argparse.ArgumentParser(description="Crear la cuenta inicial del back office")
    parser.add_argument("--name", default="Admin User")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--password", default="admin123")
    parser.add_argument("--role", default="admin", choices=["superadmin", "admin", "staff"])
    args = parser.parse_args()
    asyncio.run(create_admin(args.name, args.email, args.password, args.role))

if __name__ == "__main__":
    main()
