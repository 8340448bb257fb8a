"""
Universities Repository
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from unidoxia.modules.universities.models import University


async def get_by_id(db: AsyncSession, id: UUID) -> University | None:
    return await db.get(University, id)


async def update_scoring_config(
    db: AsyncSession,
    university: University,
    scoring_config: dict,
) -> University:
    """Replace the university's rubric."""
    university.scoring_config = scoring_config

    await db.commit()
    await db.refresh(university)

    return university
