# app/scripts/recount.py
"""
Rebuild likesCount / commentsCount from the like lists and the comments collection.

    python -m app.scripts.recount            # every project
    python -m app.scripts.recount p_abc123   # selected projects
"""
import argparse
import logging

from fastapi import HTTPException

from app.db.mongo import db
from app.services.counters import recount_project

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Repair denormalized project/comment counters")
    parser.add_argument("project_ids", nargs="*", help="Project ids (default: all)")
    args = parser.parse_args(argv)

    project_ids = args.project_ids or [p["_id"] for p in db.projects.find({}, {"_id": 1})]
    repaired = 0
    for pid in project_ids:
        try:
            result = recount_project(pid)
        except HTTPException as e:
            logger.warning(f"{pid}: {e.detail}")
            continue
        if result["project_fixed"] or result["comments_fixed"]:
            repaired += 1
            logger.info(f"{pid}: {result}")

    print(f"Checked {len(project_ids)} projects, repaired {repaired}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(main())
