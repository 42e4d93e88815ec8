"""Hierarchy reconstruction for comment threads."""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

import logfire

from comdeply.domain.model import Comment
from comdeply.domain.value import CommentId

from .base import Service


@dataclass
class CommentNode:
    """Node in a comment thread.

    Wraps a comment and its direct replies, ordered by sort key.
    """

    comment: Comment
    children: list["CommentNode"] = field(default_factory=list)


@dataclass
class CommentThread:
    """One page of a thread: root nodes plus the total number of roots."""

    roots: list[CommentNode]
    total_roots: int


def _display_order(comment: Comment) -> tuple:
    # created_at and id only break ties between equal keys
    return (comment.sort_order, comment.created_at, str(comment.id))


def iter_nodes(nodes: Iterable[CommentNode]) -> Iterator[CommentNode]:
    """Yield every node of a forest in display (pre-)order."""
    stack = list(reversed(list(nodes)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


class HierarchyBuilder(Service):
    """Builds the nested reply tree from a flat set of comments.

    The flat set is grouped by parent once and each group sorted by key,
    then children are attached to the roots by ID lookup. Every comment is
    visited once; an explicit stack replaces recursion so long reply chains
    cannot exhaust the interpreter stack.

    The result depends only on the set of comments, never on the order
    they are passed in. Deleted comments are kept as they are: redacting
    them is the presentation layer's job.
    """

    def build(
        self,
        comments: Iterable[Comment],
        roots: Optional[Iterable[Comment]] = None,
    ) -> list[CommentNode]:
        """Build the comment tree.

        Args:
            comments: Flat set of the thread's comments (tombstones included)
            roots: Root comments to build from, e.g. one page of roots.
                Defaults to every comment in ``comments`` whose parent is
                not in the set.

        Returns:
            Root nodes ordered by sort key, each with its replies attached
        """
        with logfire.span("hierarchy_builder.build"):
            # Duplicate IDs collapse to the copy that sorts first
            unique: dict[CommentId, Comment] = {}
            for comment in comments:
                kept = unique.get(comment.id)
                if kept is None or _display_order(comment) < _display_order(kept):
                    unique[comment.id] = comment

            by_parent: dict[Optional[CommentId], list[Comment]] = defaultdict(list)
            for comment in unique.values():
                by_parent[comment.parent_id].append(comment)
            for siblings in by_parent.values():
                siblings.sort(key=_display_order)

            if roots is None:
                # Replies whose parent is missing from the set are shown as roots
                root_comments = sorted(
                    (
                        c
                        for c in unique.values()
                        if c.parent_id is None or c.parent_id not in unique
                    ),
                    key=_display_order,
                )
            else:
                root_comments = sorted(
                    {r.id: r for r in roots}.values(), key=_display_order
                )

            seen: set[CommentId] = set()
            tree: list[CommentNode] = []
            stack: list[CommentNode] = []
            for root in root_comments:
                if root.id in seen:
                    continue
                seen.add(root.id)
                node = CommentNode(comment=root)
                tree.append(node)
                stack.append(node)

            while stack:
                node = stack.pop()
                for child in by_parent.get(node.comment.id, []):
                    # Guards against cycles in corrupted data
                    if child.id in seen:
                        continue
                    seen.add(child.id)
                    child_node = CommentNode(comment=child)
                    node.children.append(child_node)
                    stack.append(child_node)

            logfire.debug(
                "Built comment tree", root_count=len(tree), node_count=len(seen)
            )
            return tree
