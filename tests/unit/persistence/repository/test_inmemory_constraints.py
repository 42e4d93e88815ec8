"""In-memory repositories enforce the same constraints as the database."""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from comdeply.domain.model import Reaction
from comdeply.domain.value import ReactionType, ThreadScope, UserId
from comdeply.persistence.repository.inmemory import (
    InMemoryCommentRepository,
    InMemoryReactionRepository,
)
from tests.conftest import make_comment


class TestSiblingSortKeyUniqueness:
    """Sort keys are unique per sibling group, not per thread."""

    @pytest.mark.asyncio
    async def test_duplicate_root_key_is_rejected(self, scope):
        repo = InMemoryCommentRepository()
        await repo.save(make_comment("1", scope=scope))

        with pytest.raises(IntegrityError):
            await repo.save(make_comment("1", scope=scope))

    @pytest.mark.asyncio
    async def test_same_key_under_different_parents_is_allowed(self, scope):
        repo = InMemoryCommentRepository()
        first = await repo.save(make_comment("1", scope=scope))
        second = await repo.save(make_comment("2", scope=scope))

        await repo.save(make_comment("1.5", parent=first))
        await repo.save(make_comment("1.5", parent=second))

        assert len(await repo.find_by_scope(scope)) == 4

    @pytest.mark.asyncio
    async def test_same_key_on_another_page_is_allowed(self, scope):
        repo = InMemoryCommentRepository()
        other = ThreadScope(site_key=scope.site_key, page_id="/posts/other")

        await repo.save(make_comment("1", scope=scope))
        await repo.save(make_comment("1", scope=other))

        assert len(await repo.find_by_scope(other)) == 1

    @pytest.mark.asyncio
    async def test_resaving_a_comment_keeps_its_key(self, scope):
        repo = InMemoryCommentRepository()
        comment = await repo.save(make_comment("1", scope=scope))

        updated = await repo.save(comment.edit("Changed"))

        assert updated.sort_order == comment.sort_order

    @pytest.mark.asyncio
    async def test_batch_rewrite_is_checked_as_a_whole(self, scope):
        """Two keys may swap in one batch; a batch leaving a duplicate fails."""
        repo = InMemoryCommentRepository()
        a = await repo.save(make_comment("1", scope=scope))
        b = await repo.save(make_comment("2", scope=scope))

        await repo.update_sort_orders({a.id: b.sort_order, b.id: a.sort_order})

        assert (await repo.find_by_id(a.id)).sort_order == b.sort_order
        with pytest.raises(IntegrityError):
            await repo.update_sort_orders({a.id: Decimal("1")})
        # The failed batch changed nothing
        assert (await repo.find_by_id(a.id)).sort_order == Decimal("2")


class TestReactionCounters:
    """Counters never go negative."""

    @pytest.mark.asyncio
    async def test_adjust_floors_at_zero(self, scope):
        repo = InMemoryCommentRepository()
        comment = await repo.save(make_comment("1", scope=scope))

        updated = await repo.adjust_reaction_counts(comment.id, -1, -3)

        assert updated.like_count == 0
        assert updated.dislike_count == 0


class TestReactionIdentity:
    """One reaction per (comment, user)."""

    @pytest.mark.asyncio
    async def test_second_insert_for_same_pair_is_rejected(self):
        repo = InMemoryReactionRepository()
        comment_id = make_comment("1").id
        user_id = UserId(uuid4())
        await repo.save(
            Reaction(
                comment_id=comment_id,
                user_id=user_id,
                reaction_type=ReactionType.LIKE,
            )
        )

        with pytest.raises(IntegrityError):
            await repo.save(
                Reaction(
                    comment_id=comment_id,
                    user_id=user_id,
                    reaction_type=ReactionType.DISLIKE,
                )
            )

    @pytest.mark.asyncio
    async def test_typed_delete_leaves_other_types_alone(self):
        repo = InMemoryReactionRepository()
        comment_id = make_comment("1").id
        user_id = UserId(uuid4())
        await repo.save(
            Reaction(
                comment_id=comment_id,
                user_id=user_id,
                reaction_type=ReactionType.DISLIKE,
            )
        )

        assert not await repo.delete(comment_id, user_id, ReactionType.LIKE)
        assert await repo.delete(comment_id, user_id, ReactionType.DISLIKE)
        assert not await repo.delete(comment_id, user_id)

    @pytest.mark.asyncio
    async def test_flip_to_the_same_type_changes_nothing(self):
        repo = InMemoryReactionRepository()
        comment_id = make_comment("1").id
        user_id = UserId(uuid4())
        await repo.save(
            Reaction(
                comment_id=comment_id,
                user_id=user_id,
                reaction_type=ReactionType.LIKE,
            )
        )

        assert await repo.update_type(comment_id, user_id, ReactionType.LIKE) is None
        flipped = await repo.update_type(comment_id, user_id, ReactionType.DISLIKE)
        assert flipped.reaction_type is ReactionType.DISLIKE
