"""
Seed Reviewer Profiles

Creates reviewer profiles from a JSON file so submitted applications can be
assigned automatically. Existing reviewers (matched by e-mail) are updated.

Usage:
    python scripts/seed_reviewers.py reviewers.json

reviewers.json:
    [
        {"name": "Ada Reviewer", "email": "ada@unidoxia.com",
         "country_expertise": ["UK", "Ireland"], "program_expertise": ["Engineering"],
         "max_workload": 20}
    ]
"""

import asyncio
import json
import sys
from pathlib import Path

from sqlalchemy import select

from unidoxia.core.database import async_session_maker, close_db
from unidoxia.modules.applications.models import Application  # noqa: F401 - resolves foreign keys
from unidoxia.modules.reviews.models import ReviewerProfile


async def seed_reviewers(path: Path) -> None:
    """Create or update reviewer profiles listed in the file."""
    entries = json.loads(path.read_text())

    async with async_session_maker() as db:
        for entry in entries:
            result = await db.execute(
                select(ReviewerProfile).where(ReviewerProfile.email == entry["email"])
            )
            reviewer = result.scalar_one_or_none()

            if reviewer:
                reviewer.name = entry["name"]
                reviewer.country_expertise = entry.get("country_expertise")
                reviewer.program_expertise = entry.get("program_expertise")
                reviewer.max_workload = entry.get("max_workload", reviewer.max_workload)
                print(f"Updated reviewer: {reviewer.email}")
            else:
                reviewer = ReviewerProfile(
                    name=entry["name"],
                    email=entry["email"],
                    country_expertise=entry.get("country_expertise"),
                    program_expertise=entry.get("program_expertise"),
                    max_workload=entry.get("max_workload", 20),
                    current_workload=0,
                )
                db.add(reviewer)
                print(f"Created reviewer: {reviewer.email}")

        await db.commit()

    await close_db()
    print(f"Seeded {len(entries)} reviewer(s)")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/seed_reviewers.py <reviewers.json>")
        sys.exit(1)
    asyncio.run(seed_reviewers(Path(sys.argv[1])))
