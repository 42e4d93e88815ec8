"""Comment quota checks."""

from abc import ABC, abstractmethod

import logfire

from comdeply.config import QuotaSettings
from comdeply.domain.repository import CommentRepository, SiteRepository
from comdeply.domain.value import UserId
from comdeply.util.clock import utc_now

from .base import Service


class QuotaChecker(ABC):
    """Decides whether a site owner may receive another comment."""

    @abstractmethod
    async def allow_new_comment(self, owner_id: UserId) -> bool:
        """Check the owner's quota.

        Args:
            owner_id: Owner of the site the comment is posted on

        Returns:
            True if a new comment may be created
        """
        pass


class MonthlyQuotaChecker(QuotaChecker, Service):
    """Limits the comments an owner's sites receive per calendar month.

    Counts active comments created since the start of the current UTC month
    across every site the owner has. A limit of -1 means unlimited.
    """

    def __init__(
        self,
        site_repository: SiteRepository,
        comment_repository: CommentRepository,
        quota_settings: QuotaSettings,
    ) -> None:
        """Initialize monthly quota checker.

        Args:
            site_repository: Site repository
            comment_repository: Comment repository
            quota_settings: Quota settings
        """
        self.site_repository = site_repository
        self.comment_repository = comment_repository
        self.quota_settings = quota_settings

    async def allow_new_comment(self, owner_id: UserId) -> bool:
        limit = self.quota_settings.monthly_comment_limit
        if not self.quota_settings.enforce or limit < 0:
            return True

        with logfire.span("quota_checker.allow_new_comment", owner_id=str(owner_id)):
            sites = await self.site_repository.find_by_owner(owner_id)
            month_start = utc_now().replace(
                day=1, hour=0, minute=0, second=0, microsecond=0
            )
            used = await self.comment_repository.count_created_since(
                [site.site_key for site in sites], month_start
            )
            allowed = used < limit
            if not allowed:
                logfire.warn(
                    "Monthly comment quota reached",
                    owner_id=str(owner_id),
                    used=used,
                    limit=limit,
                )
            return allowed
