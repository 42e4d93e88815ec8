"""Unit tests for HierarchyBuilder."""

import random
from decimal import Decimal

from comdeply.domain.service import HierarchyBuilder, iter_nodes
from comdeply.domain.value import CommentState
from tests.conftest import make_comment


def _shape(nodes) -> list:
    """Reduce a forest to nested (content, children) pairs."""
    return [(node.comment.content, _shape(node.children)) for node in nodes]


class TestBuild:
    """Tests for HierarchyBuilder.build."""

    def test_empty_input(self):
        assert HierarchyBuilder().build([]) == []

    def test_nests_replies_under_parents_in_key_order(self):
        # Arrange
        first = make_comment("1", content="first")
        second = make_comment("2", content="second")
        reply_b = make_comment("1.11", parent=first, content="reply b")
        reply_a = make_comment("1.1", parent=first, content="reply a")
        nested = make_comment("1.2", parent=reply_a, content="nested")

        # Act
        tree = HierarchyBuilder().build([second, nested, reply_b, first, reply_a])

        # Assert
        assert _shape(tree) == [
            (
                "first",
                [
                    ("reply a", [("nested", [])]),
                    ("reply b", []),
                ],
            ),
            ("second", []),
        ]

    def test_result_does_not_depend_on_input_order(self):
        # Arrange
        root = make_comment("1", content="root")
        comments = [root]
        parent = root
        for i in range(5):
            child = make_comment(f"1.{i + 1}", parent=parent, content=f"c{i}")
            sibling = make_comment(f"1.{i + 1}1", parent=parent, content=f"s{i}")
            comments.extend([child, sibling])
            parent = child
        shuffled = list(comments)
        random.Random(7).shuffle(shuffled)

        # Act
        ordered = HierarchyBuilder().build(comments)
        unordered = HierarchyBuilder().build(shuffled)

        # Assert
        assert _shape(ordered) == _shape(unordered)

    def test_building_twice_gives_the_same_tree(self):
        # Arrange
        root = make_comment("1", content="root")
        reply = make_comment("1.1", parent=root, content="reply")
        builder = HierarchyBuilder()

        # Act & Assert
        assert _shape(builder.build([root, reply])) == _shape(
            builder.build([root, reply])
        )

    def test_duplicate_comments_appear_once(self):
        # Arrange
        root = make_comment("1", content="root")
        reply = make_comment("1.1", parent=root, content="reply")

        # Act
        tree = HierarchyBuilder().build([root, reply, reply, root])

        # Assert
        assert _shape(tree) == [("root", [("reply", [])])]

    def test_conflicting_duplicates_resolve_regardless_of_order(self):
        # Arrange
        root = make_comment("1", content="root")
        stale = root.model_copy(update={"sort_order": Decimal("3"), "content": "stale"})
        other = make_comment("2", content="other")

        # Act
        forward = HierarchyBuilder().build([root, stale, other])
        backward = HierarchyBuilder().build([other, stale, root])

        # Assert
        assert _shape(forward) == _shape(backward)
        assert _shape(forward) == [("root", []), ("other", [])]

    def test_reply_with_missing_parent_becomes_root(self):
        # Arrange
        root = make_comment("2", content="root")
        missing = make_comment("1", content="missing")
        orphan = make_comment("1.1", parent=missing, content="orphan")
        reply = make_comment("1.11", parent=orphan, content="reply")

        # Act
        tree = HierarchyBuilder().build([root, orphan, reply])

        # Assert
        assert _shape(tree) == [("orphan", [("reply", [])]), ("root", [])]

    def test_tombstones_stay_in_place(self):
        """Deleted comments are kept; redaction happens in the views."""
        # Arrange
        root = make_comment(
            "1", state=CommentState.DELETED_WITH_DESCENDANTS, content="gone"
        )
        reply = make_comment("1.1", parent=root, content="reply")

        # Act
        tree = HierarchyBuilder().build([root, reply])

        # Assert
        assert tree[0].comment.state is CommentState.DELETED_WITH_DESCENDANTS
        assert tree[0].children[0].comment.id == reply.id

    def test_given_roots_limit_the_forest(self):
        """Only the given roots (one page) are built, with their subtrees."""
        # Arrange
        first = make_comment("1", content="first")
        second = make_comment("2", content="second")
        reply = make_comment("2.1", parent=second, content="reply")

        # Act
        tree = HierarchyBuilder().build([first, second, reply], roots=[second])

        # Assert
        assert _shape(tree) == [("second", [("reply", [])])]

    def test_deep_chain_does_not_recurse(self):
        """A reply chain far deeper than the recursion limit still builds."""
        # Arrange
        root = make_comment("1", content="root")
        comments = [root]
        parent = root
        for _ in range(3000):
            # Depth saturates while nesting continues
            parent = make_comment("1.1", parent=parent, depth=3)
            comments.append(parent)

        # Act
        tree = HierarchyBuilder().build(comments)

        # Assert
        assert len(list(iter_nodes(tree))) == len(comments)

    def test_cycle_in_corrupted_data_terminates(self):
        # Arrange
        root = make_comment("1", content="root")
        a = make_comment("1.1", parent=root, content="a")
        b = make_comment("1.2", parent=a, content="b")
        looped = a.model_copy(update={"parent_id": b.id})

        # Act
        tree = HierarchyBuilder().build([root, looped, b])

        # Assert
        assert _shape(tree) == [("root", [])]


class TestIterNodes:
    """Tests for iter_nodes."""

    def test_yields_in_display_order(self):
        # Arrange
        first = make_comment("1", content="first")
        reply = make_comment("1.1", parent=first, content="reply")
        second = make_comment("2", content="second")
        tree = HierarchyBuilder().build([first, reply, second])

        # Act
        contents = [node.comment.content for node in iter_nodes(tree)]

        # Assert
        assert contents == ["first", "reply", "second"]
