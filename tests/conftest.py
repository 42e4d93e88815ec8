"""Test configuration and fixtures."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import logfire
import pytest

from comdeply.domain.model import Comment, Site
from comdeply.domain.value import (
    CommentId,
    CommentState,
    SiteId,
    ThreadScope,
    UserId,
)

SITE_KEY = "blog"
PAGE_ID = "/posts/hello-world"


@pytest.fixture(autouse=True, scope="session")
def configure_logfire_for_tests():
    """Keep Logfire local and quiet during tests."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def scope() -> ThreadScope:
    return ThreadScope(site_key=SITE_KEY, page_id=PAGE_ID)


def make_site(
    site_key: str = SITE_KEY,
    owner_id: UserId | None = None,
    is_active: bool = True,
) -> Site:
    """Helper to build a site for tests."""
    return Site(
        id=SiteId(uuid4()),
        site_key=site_key,
        owner_id=owner_id or UserId(uuid4()),
        name=f"Site {site_key}",
        is_active=is_active,
    )


_clock = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def make_comment(
    sort_order: str | Decimal,
    parent: Comment | None = None,
    scope: ThreadScope | None = None,
    state: CommentState = CommentState.ACTIVE,
    author_id: UserId | None = None,
    depth: int | None = None,
    created_at: datetime | None = None,
    content: str = "A comment",
) -> Comment:
    """Helper to build a comment for tests.

    Creation times increase with every call unless given, so creation
    order matches call order.
    """
    global _clock
    _clock += timedelta(seconds=1)
    scope = scope or (parent.scope if parent else ThreadScope(site_key=SITE_KEY, page_id=PAGE_ID))
    return Comment(
        id=CommentId(uuid4()),
        site_key=scope.site_key,
        page_id=scope.page_id,
        author_id=author_id or UserId(uuid4()),
        author_name="Tester",
        content=content,
        parent_id=parent.id if parent else None,
        depth=depth if depth is not None else (parent.depth + 1 if parent else 1),
        sort_order=Decimal(sort_order),
        state=state,
        created_at=created_at or _clock,
        updated_at=created_at or _clock,
    )
