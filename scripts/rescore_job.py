#!/usr/bin/env python3
"""
Rescore Script
Re-runs rule scoring for every stored page of a crawl job, optionally
queueing a forced content-quality rescore as well.

Usage:
    python scripts/rescore_job.py <job_id> [--llm]

Example:
    python scripts/rescore_job.py 0192f1c4-... --llm
"""

import argparse
import asyncio
import sys

from app.features.crawl.services.ingest_service import rescore_job
from app.platform.async_db_helper import get_async_db
from app.platform.db.registry import import_all_models
from app.platform.exceptions import JobNotFoundError


async def run(job_id: str):
    async with get_async_db() as db:
        return await rescore_job(db, job_id)


def main():
    parser = argparse.ArgumentParser(description="Rescore all pages of a crawl job")
    parser.add_argument("job_id", help="Crawl job id")
    parser.add_argument(
        "--llm",
        action="store_true",
        help="Also queue a forced content-quality rescore on the worker",
    )
    args = parser.parse_args()

    import_all_models()

    try:
        result = asyncio.run(run(args.job_id))
    except JobNotFoundError as e:
        print(f"❌ {e.message}")
        sys.exit(1)

    print(f"✅ Rescored {result.pages_rescored} pages, {result.issues_created} issues")

    if args.llm:
        from app.features.crawl.workers.tasks import rescore_content_quality

        rescore_content_quality.delay(args.job_id)
        print("✅ Content-quality rescore queued")


if __name__ == "__main__":
    main()
