"""Unit tests for ReactUseCase."""

from uuid import uuid4

import pytest

from comdeply.application.usecase.reaction import ReactRequest, ReactUseCase
from comdeply.domain.repository import CommentRepository
from comdeply.domain.value import ReactionType
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestReactUseCase:
    """Tests for ReactUseCase."""

    @pytest.mark.asyncio
    async def test_like_then_unlike(self, unit_env, scope):
        # Arrange
        comment_repo = await unit_env.get(CommentRepository)
        use_case = await unit_env.get(ReactUseCase)
        comment = await comment_repo.save(make_comment("1", scope=scope))
        request = ReactRequest(
            comment_id=str(comment.id),
            user_id=str(uuid4()),
            reaction_type=ReactionType.LIKE,
        )

        # Act
        liked = await use_case.execute(request)
        unliked = await use_case.execute(request)

        # Assert
        assert liked.like_count == 1
        assert liked.viewer_reaction is ReactionType.LIKE
        assert unliked.like_count == 0
        assert unliked.viewer_reaction is None

    @pytest.mark.asyncio
    async def test_flip_reports_new_reaction(self, unit_env, scope):
        # Arrange
        comment_repo = await unit_env.get(CommentRepository)
        use_case = await unit_env.get(ReactUseCase)
        comment = await comment_repo.save(make_comment("1", scope=scope))
        user_id = str(uuid4())
        await use_case.execute(
            ReactRequest(
                comment_id=str(comment.id),
                user_id=user_id,
                reaction_type=ReactionType.LIKE,
            )
        )

        # Act
        response = await use_case.execute(
            ReactRequest(
                comment_id=str(comment.id),
                user_id=user_id,
                reaction_type=ReactionType.DISLIKE,
            )
        )

        # Assert
        assert response.viewer_reaction is ReactionType.DISLIKE
        assert (response.like_count, response.dislike_count) == (0, 1)
