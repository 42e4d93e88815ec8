#!/usr/bin/env python3
"""Rewrite the sort keys of one or more threads into canonical form.

Runs outside the request path, one transaction per thread.

Usage:
    python scripts/reorder_comments.py SITE_KEY PAGE_ID [PAGE_ID ...]
"""

import argparse
import asyncio
import sys

import logfire

from comdeply.config import Settings
from comdeply.domain.service import ReorderService
from comdeply.domain.value import ThreadScope
from comdeply.util.di.container import create_container
from comdeply.util.logging import setup_logging
from comdeply.util.observability import configure_logfire


async def reorder(site_key: str, page_ids: list[str]) -> int:
    """Reorder each page in its own request scope (and transaction)."""
    container = create_container(with_fastapi=False)
    total = 0
    try:
        for page_id in page_ids:
            scope = ThreadScope(site_key=site_key, page_id=page_id)
            async with container() as request_container:
                reorder_service = await request_container.get(ReorderService)
                changed = await reorder_service.reorder_all(scope)
            logfire.info("Thread reordered", scope=str(scope), changed=changed)
            total += changed
    finally:
        await container.close()
    return total


def main() -> int:
    parser = argparse.ArgumentParser(description="Canonicalize comment sort keys")
    parser.add_argument("site_key")
    parser.add_argument("page_ids", nargs="+")
    args = parser.parse_args()

    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    try:
        total = asyncio.run(reorder(args.site_key, args.page_ids))
    except Exception as e:
        logfire.error(
            "Reorder failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise

    logfire.info("Reorder finished", pages=len(args.page_ids), changed=total)
    return 0


if __name__ == "__main__":
    sys.exit(main())
