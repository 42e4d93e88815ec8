"""Site repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from comdeply.domain.model.site import Site
from comdeply.domain.value import UserId


class SiteRepository(ABC):
    """Repository for Site entity.

    Defines the contract for site persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_key(self, site_key: str) -> Optional[Site]:
        """Find a site by its public key.

        Args:
            site_key: The key the widget is embedded with

        Returns:
            The site if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_owner(self, owner_id: UserId) -> List[Site]:
        """Find all sites owned by a user."""
        pass

    @abstractmethod
    async def save(self, site: Site) -> Site:
        """Save a site (create or update)."""
        pass
