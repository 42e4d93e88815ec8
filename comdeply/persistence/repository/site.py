"""PostgreSQL implementation of Site repository."""

from typing import List, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comdeply.domain.model import Site
from comdeply.domain.repository import SiteRepository
from comdeply.domain.value import UserId
from comdeply.persistence.mappers import row_to_site, site_to_dict
from comdeply.persistence.tables import sites_table


class PostgresSiteRepository(SiteRepository):
    """PostgreSQL implementation of SiteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_key(self, site_key: str) -> Optional[Site]:
        """Find a site by its public key."""
        stmt = select(sites_table).where(sites_table.c.site_key == site_key)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_site(row._asdict()) if row else None

    async def find_by_owner(self, owner_id: UserId) -> List[Site]:
        """Find all sites owned by a user."""
        stmt = (
            select(sites_table)
            .where(sites_table.c.owner_id == owner_id)
            .order_by(sites_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_site(row._asdict()) for row in result.fetchall()]

    async def save(self, site: Site) -> Site:
        """Save a site (create or update)."""
        site_dict = site_to_dict(site)
        existing = await self.find_by_key(site.site_key)

        if existing:
            stmt = (
                update(sites_table)
                .where(sites_table.c.id == site.id)
                .values(**site_dict)
            )
        else:
            stmt = insert(sites_table).values(**site_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return site
