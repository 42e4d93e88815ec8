"""Domain layer DI providers."""

from dishka import Scope, provide

from comdeply.config import AuthSettings, CommentSettings, QuotaSettings
from comdeply.domain.repository import (
    CommentRepository,
    ReactionRepository,
    SiteRepository,
)
from comdeply.domain.service import (
    CommentService,
    HierarchyBuilder,
    JWTService,
    MonthlyQuotaChecker,
    QuotaChecker,
    ReactionService,
    ReorderService,
    SortKeyAssigner,
)
from comdeply.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_sort_key_assigner(
        self, comment_repository: CommentRepository
    ) -> SortKeyAssigner:
        """Provide sort key assigner."""
        return SortKeyAssigner(comment_repository=comment_repository)

    @provide
    def get_hierarchy_builder(self) -> HierarchyBuilder:
        """Provide hierarchy builder."""
        return HierarchyBuilder()

    @provide
    def get_quota_checker(
        self,
        site_repository: SiteRepository,
        comment_repository: CommentRepository,
        quota_settings: QuotaSettings,
    ) -> QuotaChecker:
        """Provide the monthly quota checker."""
        return MonthlyQuotaChecker(
            site_repository=site_repository,
            comment_repository=comment_repository,
            quota_settings=quota_settings,
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        site_repository: SiteRepository,
        sort_key_assigner: SortKeyAssigner,
        hierarchy_builder: HierarchyBuilder,
        quota_checker: QuotaChecker,
        comment_settings: CommentSettings,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            site_repository=site_repository,
            sort_key_assigner=sort_key_assigner,
            hierarchy_builder=hierarchy_builder,
            quota_checker=quota_checker,
            comment_settings=comment_settings,
        )

    @provide
    def get_reaction_service(
        self,
        reaction_repository: ReactionRepository,
        comment_repository: CommentRepository,
    ) -> ReactionService:
        """Provide reaction domain service."""
        return ReactionService(
            reaction_repository=reaction_repository,
            comment_repository=comment_repository,
        )

    @provide
    def get_reorder_service(
        self,
        comment_repository: CommentRepository,
        comment_settings: CommentSettings,
    ) -> ReorderService:
        """Provide reorder domain service."""
        return ReorderService(
            comment_repository=comment_repository,
            comment_settings=comment_settings,
        )
