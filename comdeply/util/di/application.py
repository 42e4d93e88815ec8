"""Application layer DI providers."""

from dishka import Scope, provide

from comdeply.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
    GetCommentCountsUseCase,
    GetCommentCountUseCase,
    GetThreadUseCase,
    ListCommentsUseCase,
    ListUserCommentsUseCase,
    UpdateCommentUseCase,
)
from comdeply.application.usecase.moderation import (
    AdminDeleteCommentUseCase,
    RecountReactionsUseCase,
    ReorderCommentsUseCase,
    UpdateCommentStatusUseCase,
)
from comdeply.application.usecase.reaction import ReactUseCase
from comdeply.config import CommentSettings
from comdeply.domain.service import (
    CommentService,
    JWTService,
    ReactionService,
    ReorderService,
)
from comdeply.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService, comment_settings: CommentSettings
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(
            comment_service=comment_service, comment_settings=comment_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_update_comment_use_case(
        self,
        comment_service: CommentService,
        reaction_service: ReactionService,
        comment_settings: CommentSettings,
    ) -> UpdateCommentUseCase:
        """Provide update comment use case."""
        return UpdateCommentUseCase(
            comment_service=comment_service,
            reaction_service=reaction_service,
            comment_settings=comment_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_get_thread_use_case(
        self,
        comment_service: CommentService,
        reaction_service: ReactionService,
        jwt_service: JWTService,
        comment_settings: CommentSettings,
    ) -> GetThreadUseCase:
        """Provide get thread use case."""
        return GetThreadUseCase(
            comment_service=comment_service,
            reaction_service=reaction_service,
            jwt_service=jwt_service,
            comment_settings=comment_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_comments_use_case(
        self,
        comment_service: CommentService,
        reaction_service: ReactionService,
        jwt_service: JWTService,
        comment_settings: CommentSettings,
    ) -> ListCommentsUseCase:
        """Provide list comments use case."""
        return ListCommentsUseCase(
            comment_service=comment_service,
            reaction_service=reaction_service,
            jwt_service=jwt_service,
            comment_settings=comment_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_user_comments_use_case(
        self, comment_service: CommentService, comment_settings: CommentSettings
    ) -> ListUserCommentsUseCase:
        """Provide list user comments use case."""
        return ListUserCommentsUseCase(
            comment_service=comment_service, comment_settings=comment_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_comment_count_use_case(
        self, comment_service: CommentService
    ) -> GetCommentCountUseCase:
        """Provide single page count use case."""
        return GetCommentCountUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_comment_counts_use_case(
        self, comment_service: CommentService
    ) -> GetCommentCountsUseCase:
        """Provide batch count use case."""
        return GetCommentCountsUseCase(comment_service=comment_service)

    # Reaction use cases
    @provide(scope=Scope.REQUEST)
    def get_react_use_case(self, reaction_service: ReactionService) -> ReactUseCase:
        """Provide react use case."""
        return ReactUseCase(reaction_service=reaction_service)

    # Moderation use cases
    @provide(scope=Scope.REQUEST)
    def get_admin_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> AdminDeleteCommentUseCase:
        """Provide administrator delete use case."""
        return AdminDeleteCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_update_comment_status_use_case(
        self, comment_service: CommentService, comment_settings: CommentSettings
    ) -> UpdateCommentStatusUseCase:
        """Provide update comment status use case."""
        return UpdateCommentStatusUseCase(
            comment_service=comment_service, comment_settings=comment_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_recount_reactions_use_case(
        self, reaction_service: ReactionService
    ) -> RecountReactionsUseCase:
        """Provide recount reactions use case."""
        return RecountReactionsUseCase(reaction_service=reaction_service)

    @provide(scope=Scope.REQUEST)
    def get_reorder_comments_use_case(
        self, reorder_service: ReorderService
    ) -> ReorderCommentsUseCase:
        """Provide reorder comments use case."""
        return ReorderCommentsUseCase(reorder_service=reorder_service)
