#!/usr/bin/env python3
"""Seed a local database with a demo admin, project and license key.

Usage:
    python scripts/seed_demo.py OWNER REPO PATH
    # e.g. python scripts/seed_demo.py octo scripts src/main.lua
"""

import asyncio
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from scriptguard.common.config import get_settings
from scriptguard.common.database import DatabaseManager
from scriptguard.common.security import create_session_token
from scriptguard.deps import get_account_service, get_key_service, get_project_service

DEMO_ADMIN = "demo-admin"


async def seed_demo(owner: str, repo: str, path: str) -> None:
    settings = get_settings()
    db = DatabaseManager(settings)
    await db.init()
    await db.create_all()

    projects = get_project_service()

    async with db.get_session() as session:
        await get_account_service().register_admin(
            session, DEMO_ADMIN, "Demo Admin", "demo@example.com"
        )
        existing = await projects.list_projects_by_author(session, DEMO_ADMIN)
        if existing:
            project = existing[0]
            print(f"  [skip] project {project.project_id} ({project.name}) already exists")
        else:
            project = await projects.create_project(
                session, DEMO_ADMIN, "Demo Script", owner, repo, path
            )
            print(f"  [created] project {project.project_id}")

        key = await get_key_service().create_key(
            session, project.project_id, owner_identity="demo-user", display_name="Demo User"
        )
        print(f"  [created] key {key.key}")

    await db.close()
    print(f"\nDone. Admin session: {create_session_token(DEMO_ADMIN)}")


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    asyncio.run(seed_demo(*sys.argv[1:4]))
