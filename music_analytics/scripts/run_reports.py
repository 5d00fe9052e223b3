# scripts/run_reports.py
"""
Run the five reference reports straight against MongoDB and print them:
royalties for the last month, top 10 songs in Guatemala over 7 days,
Premium zombies over 30 days, Reggaeton demographics, top 5 Bad Bunny fans.

Usage: python -m music_analytics.scripts.run_reports
"""
import json
from typing import Any, Dict, List
from pymongo import MongoClient #type: ignore

from music_analytics import config as cfg
from music_analytics.common.logger import get_logger
from music_analytics.core.pipeline import AggregationPlan
from music_analytics.services import params as P
from music_analytics.services import report_builder as builder
from music_analytics.services import report_service as shaping

logger = get_logger("Run Reports")


class SyncQueryExecutor:
    """Blocking counterpart of MongoQueryExecutor for command-line use."""

    def __init__(self, db):
        self._db = db

    def execute(self, plan: AggregationPlan) -> List[Dict[str, Any]]:
        return list(self._db[plan.collection].aggregate(plan.to_pipeline()))


def reference_reports(executor) -> Dict[str, Any]:
    now = P.utc_now()
    royalties = P.royalty_params(None, "30", None, None, now=now)
    top_gt = P.top_songs_params("GT", "7", "10", now=now)
    zombies = P.zombie_params("30", "Premium", None, now=now)
    reggaeton = P.genre_demographics_params("Reggaeton", now=now)
    bad_bunny = P.top_fans_params("Bad Bunny", "5", now=now)

    return {
        "royalties": shaping.shape_royalties(
            executor.execute(builder.build_royalty_plan(royalties)), royalties),
        "top_songs_gt": shaping.shape_top_songs(
            executor.execute(builder.build_top_songs_plan(top_gt)), top_gt),
        "zombie_users": shaping.shape_zombies(
            executor.execute(builder.build_zombie_plan(zombies)), zombies),
        "reggaeton_demographics": shaping.shape_genre_demographics(
            executor.execute(builder.build_genre_demographics_plan(reggaeton)), reggaeton),
        "bad_bunny_top_fans": shaping.shape_top_fans(
            executor.execute(builder.build_top_fans_plan(bad_bunny)), bad_bunny),
    }


def main():
    client = MongoClient(cfg.MONGO_URI)
    try:
        client.admin.command('ping')
        executor = SyncQueryExecutor(client[cfg.MONGO_DB])
        for name, report in reference_reports(executor).items():
            logger.info(f"=== {name} ({len(report['data'])} rows) ===")
            print(json.dumps(report, indent=2, ensure_ascii=False))
    finally:
        client.close()


if __name__ == "__main__":
    main()
