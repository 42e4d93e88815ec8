"""Unit tests for Comment lifecycle transitions."""

import pytest

from comdeply.domain.error import AlreadyDeletedError, CannotEditDeletedError
from comdeply.domain.value import CommentState, CommentStatus
from tests.conftest import make_comment


class TestCommentTransitions:
    """Legal and illegal moves between lifecycle states."""

    def test_tombstone_replaces_content(self):
        comment = make_comment("1", content="Original")

        tombstone = comment.tombstone("[deleted]")

        assert tombstone.state is CommentState.DELETED_WITH_DESCENDANTS
        assert tombstone.content == "[deleted]"
        assert tombstone.is_deleted
        # Immutable: the original is untouched
        assert comment.state is CommentState.ACTIVE

    def test_tombstone_can_die(self):
        tombstone = make_comment("1").tombstone("[deleted]")

        assert tombstone.mark_dead().state is CommentState.DELETED_LEAF

    def test_active_comment_can_die_directly(self):
        dead = make_comment("1", content="Kept").mark_dead()

        assert dead.state is CommentState.DELETED_LEAF
        assert dead.content == "Kept"

    @pytest.mark.parametrize(
        "state", [CommentState.DELETED_WITH_DESCENDANTS, CommentState.DELETED_LEAF]
    )
    def test_deleted_comment_cannot_be_tombstoned(self, state):
        with pytest.raises(AlreadyDeletedError):
            make_comment("1", state=state).tombstone("[deleted]")

    def test_dead_comment_cannot_die_again(self):
        with pytest.raises(AlreadyDeletedError):
            make_comment("1", state=CommentState.DELETED_LEAF).mark_dead()

    @pytest.mark.parametrize(
        "state", [CommentState.DELETED_WITH_DESCENDANTS, CommentState.DELETED_LEAF]
    )
    def test_deleted_comment_cannot_be_edited_or_moderated(self, state):
        comment = make_comment("1", state=state)

        with pytest.raises(CannotEditDeletedError):
            comment.edit("New")
        with pytest.raises(CannotEditDeletedError):
            comment.with_status(CommentStatus.APPROVED)

    def test_only_dead_leaves_stop_keeping_ancestors_alive(self):
        assert CommentState.ACTIVE.is_living
        assert CommentState.DELETED_WITH_DESCENDANTS.is_living
        assert not CommentState.DELETED_LEAF.is_living
