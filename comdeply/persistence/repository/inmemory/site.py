"""In-memory site repository for testing."""

from typing import Optional

from comdeply.domain.model.site import Site
from comdeply.domain.repository.site import SiteRepository
from comdeply.domain.value import UserId


class InMemorySiteRepository(SiteRepository):
    """In-memory implementation of SiteRepository for testing."""

    def __init__(self) -> None:
        self._sites: dict[str, Site] = {}

    async def find_by_key(self, site_key: str) -> Optional[Site]:
        """Find a site by its public key."""
        return self._sites.get(site_key)

    async def find_by_owner(self, owner_id: UserId) -> list[Site]:
        """Find all sites owned by a user."""
        return [s for s in self._sites.values() if s.owner_id == owner_id]

    async def save(self, site: Site) -> Site:
        """Save or update a site."""
        self._sites[site.site_key] = site
        return site
