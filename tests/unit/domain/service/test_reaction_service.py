"""Unit tests for ReactionService."""

import asyncio
from uuid import uuid4

import pytest

from comdeply.domain.error import CannotEditDeletedError, CommentNotFoundError
from comdeply.domain.model import Reaction
from comdeply.domain.repository import CommentRepository, ReactionRepository
from comdeply.domain.service import ReactionService
from comdeply.domain.value import CommentId, CommentState, ReactionType, UserId
from comdeply.persistence.repository.inmemory import InMemoryReactionRepository
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


class TestReact:
    """Tests for the like/dislike toggle."""

    @pytest.mark.asyncio
    async def test_first_like_adds_reaction(self, unit_env, scope):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        comment_repo = await unit_env.get(CommentRepository)
        reaction_repo = await unit_env.get(ReactionRepository)
        comment = await comment_repo.save(make_comment("1", scope=scope))
        user_id = UserId(uuid4())

        # Act
        result = await reaction_service.react(comment.id, user_id, ReactionType.LIKE)

        # Assert
        assert result.like_count == 1
        assert result.dislike_count == 0
        stored = await reaction_repo.find_by_comment_and_user(comment.id, user_id)
        assert stored.reaction_type is ReactionType.LIKE

    @pytest.mark.asyncio
    async def test_same_reaction_again_removes_it(self, unit_env, scope):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        comment_repo = await unit_env.get(CommentRepository)
        reaction_repo = await unit_env.get(ReactionRepository)
        comment = await comment_repo.save(make_comment("1", scope=scope))
        user_id = UserId(uuid4())
        await reaction_service.react(comment.id, user_id, ReactionType.DISLIKE)

        # Act
        result = await reaction_service.react(comment.id, user_id, ReactionType.DISLIKE)

        # Assert
        assert result.like_count == 0
        assert result.dislike_count == 0
        assert await reaction_repo.find_by_comment_and_user(comment.id, user_id) is None

    @pytest.mark.asyncio
    async def test_opposite_reaction_flips_counters(self, unit_env, scope):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_repo.save(make_comment("1", scope=scope))
        user_id = UserId(uuid4())
        await reaction_service.react(comment.id, user_id, ReactionType.LIKE)

        # Act
        result = await reaction_service.react(comment.id, user_id, ReactionType.DISLIKE)

        # Assert
        assert result.like_count == 0
        assert result.dislike_count == 1

    @pytest.mark.asyncio
    async def test_counters_track_several_users(self, unit_env, scope):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_repo.save(make_comment("1", scope=scope))

        # Act
        for _ in range(3):
            await reaction_service.react(comment.id, UserId(uuid4()), ReactionType.LIKE)
        result = await reaction_service.react(
            comment.id, UserId(uuid4()), ReactionType.DISLIKE
        )

        # Assert
        assert result.like_count == 3
        assert result.dislike_count == 1

    @pytest.mark.asyncio
    async def test_deleted_comment_rejects_reactions(self, unit_env, scope):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_repo.save(
            make_comment("1", scope=scope, state=CommentState.DELETED_WITH_DESCENDANTS)
        )

        # Act & Assert
        with pytest.raises(CannotEditDeletedError):
            await reaction_service.react(comment.id, UserId(uuid4()), ReactionType.LIKE)

    @pytest.mark.asyncio
    async def test_missing_comment_raises(self, unit_env):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)

        # Act & Assert
        with pytest.raises(CommentNotFoundError):
            await reaction_service.react(
                CommentId(uuid4()), UserId(uuid4()), ReactionType.LIKE
            )


class _YieldingReactionRepository(InMemoryReactionRepository):
    """Hands control back to the event loop after every reaction lookup."""

    async def find_by_comment_and_user(self, comment_id, user_id, for_update=False):
        reaction = await super().find_by_comment_and_user(
            comment_id, user_id, for_update
        )
        await asyncio.sleep(0)
        return reaction


class TestConcurrentToggles:
    """Counters keep matching the rows when one user's toggles interleave."""

    async def _setup(self, unit_env, scope):
        comment_repo = await unit_env.get(CommentRepository)
        reaction_repo = _YieldingReactionRepository()
        reaction_service = ReactionService(reaction_repo, comment_repo)
        comment = await comment_repo.save(make_comment("1", scope=scope))
        return comment_repo, reaction_repo, reaction_service, comment

    @pytest.mark.asyncio
    async def test_double_unlike_does_not_overcount(self, unit_env, scope):
        # Arrange
        comment_repo, reaction_repo, reaction_service, comment = await self._setup(
            unit_env, scope
        )
        user_id = UserId(uuid4())
        await reaction_service.react(comment.id, user_id, ReactionType.LIKE)
        await reaction_service.react(comment.id, UserId(uuid4()), ReactionType.LIKE)

        # Act
        await asyncio.gather(
            reaction_service.react(comment.id, user_id, ReactionType.LIKE),
            reaction_service.react(comment.id, user_id, ReactionType.LIKE),
        )

        # Assert
        stored = await comment_repo.find_by_id(comment.id)
        rows = await reaction_repo.count_by_comment(comment.id)
        assert stored.like_count == rows[ReactionType.LIKE]
        assert stored.dislike_count == rows[ReactionType.DISLIKE] == 0

    @pytest.mark.asyncio
    async def test_double_flip_does_not_overcount(self, unit_env, scope):
        # Arrange
        comment_repo, reaction_repo, reaction_service, comment = await self._setup(
            unit_env, scope
        )
        user_id = UserId(uuid4())
        await reaction_service.react(comment.id, user_id, ReactionType.LIKE)

        # Act
        await asyncio.gather(
            reaction_service.react(comment.id, user_id, ReactionType.DISLIKE),
            reaction_service.react(comment.id, user_id, ReactionType.DISLIKE),
        )

        # Assert
        stored = await comment_repo.find_by_id(comment.id)
        rows = await reaction_repo.count_by_comment(comment.id)
        assert stored.like_count == rows[ReactionType.LIKE] == 0
        assert stored.dislike_count == rows[ReactionType.DISLIKE]


class TestViewerReactions:
    """Tests for get_user_reactions."""

    @pytest.mark.asyncio
    async def test_returns_only_the_users_reactions(self, unit_env, scope):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        comment_repo = await unit_env.get(CommentRepository)
        liked = await comment_repo.save(make_comment("1", scope=scope))
        untouched = await comment_repo.save(make_comment("2", scope=scope))
        user_id = UserId(uuid4())
        await reaction_service.react(liked.id, user_id, ReactionType.LIKE)
        await reaction_service.react(untouched.id, UserId(uuid4()), ReactionType.LIKE)

        # Act
        reactions = await reaction_service.get_user_reactions(
            user_id, [liked.id, untouched.id]
        )

        # Assert
        assert reactions == {liked.id: ReactionType.LIKE}

    @pytest.mark.asyncio
    async def test_no_comments_means_no_lookup(self, unit_env):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)

        # Act & Assert
        assert await reaction_service.get_user_reactions(UserId(uuid4()), []) == {}


class TestRecount:
    """Tests for recount_reactions."""

    @pytest.mark.asyncio
    async def test_counters_are_rebuilt_from_rows(self, unit_env, scope):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        comment_repo = await unit_env.get(CommentRepository)
        reaction_repo = await unit_env.get(ReactionRepository)
        comment = await comment_repo.save(make_comment("1", scope=scope))
        # Counters drifted: rows were written behind the service's back
        for reaction_type in (
            ReactionType.LIKE,
            ReactionType.LIKE,
            ReactionType.DISLIKE,
        ):
            await reaction_repo.save(
                Reaction(
                    comment_id=comment.id,
                    user_id=UserId(uuid4()),
                    reaction_type=reaction_type,
                )
            )
        await comment_repo.set_reaction_counts(comment.id, 40, 0)

        # Act
        result = await reaction_service.recount_reactions(comment.id)

        # Assert
        assert result.like_count == 2
        assert result.dislike_count == 1

    @pytest.mark.asyncio
    async def test_missing_comment_raises(self, unit_env):
        # Arrange
        reaction_service = await unit_env.get(ReactionService)

        # Act & Assert
        with pytest.raises(CommentNotFoundError):
            await reaction_service.recount_reactions(CommentId(uuid4()))
