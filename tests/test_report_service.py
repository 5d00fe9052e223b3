"""Result shaping: rounding, ranks, percentages, envelopes."""
import asyncio

import pytest
from bson import ObjectId

from music_analytics.services import params as P
from music_analytics.services import report_service as rs
from music_analytics.services.report_service import ReportService

from conftest import FakeExecutor

ARTIST_ROWS = [
    {"artist_id": "a1", "artist": "Bad Bunny", "total_seconds": 7385, "total_minutes": 123.08,
     "total_hours": 2.05, "total_streams": 41},
    {"artist_id": "a2", "artist": "Karol G", "total_seconds": 1800, "total_minutes": 30.0,
     "total_hours": 0.5, "total_streams": 9},
    {"artist_id": "a3", "artist": "Shakira", "total_seconds": 61, "total_minutes": 1.02,
     "total_hours": 0.02, "total_streams": 1},
]


class TestNumberFormatting:

    @pytest.mark.parametrize("value,expected", [
        (0.125, 0.13),
        (2.675, 2.68),
        (1.005, 1.01),
        (0.004, 0.0),
        (10, 10.0),
    ])
    def test_round2_is_half_up(self, value, expected):
        assert rs.round2(value) == expected

    def test_percentage_two_decimals(self):
        assert rs.format_percentage(1, 3) == "33.33%"
        assert rs.format_percentage(2, 3) == "66.67%"
        assert rs.format_percentage(5, 5) == "100.00%"

    def test_percentage_of_zero_total(self):
        assert rs.format_percentage(0, 0) == "0.00%"

    def test_format_amount(self):
        assert rs.format_amount(0.01) == "$0.01"
        assert rs.format_amount(2.0) == "$2"
        assert rs.format_amount(0.0035) == "$0.0035"

    def test_json_safe_converts_ids_and_dates(self, now):
        oid = ObjectId()
        assert rs.to_json_safe({"a": [oid], "b": now}) == {"a": [str(oid)], "b": now.isoformat()}


class TestShapeRoyalties:

    def test_per_stream_earnings(self, now):
        params = P.royalty_params(None, None, "0.01", None, now=now)
        report = rs.shape_royalties(ARTIST_ROWS, params)
        assert [row["earnings_usd"] for row in report["data"]] == [0.41, 0.09, 0.01]
        assert all(row["rate_applied"] == "$0.01/stream" for row in report["data"])

    def test_per_minute_earnings_when_rate_positive(self, now):
        params = P.royalty_params(None, None, "0.01", "0.005", now=now)
        report = rs.shape_royalties(ARTIST_ROWS, params)
        expected = [rs.round2(row["total_minutes"] * 0.005) for row in ARTIST_ROWS]
        assert [row["earnings_usd"] for row in report["data"]] == expected
        assert report["data"][0]["rate_applied"] == "$0.005/min"

    def test_total_is_rounded_sum_of_rounded_rows(self, now):
        params = P.royalty_params(None, None, "0.0137", None, now=now)
        report = rs.shape_royalties(ARTIST_ROWS, params)
        per_row = [rs.round2(row["total_streams"] * 0.0137) for row in ARTIST_ROWS]
        total = 0
        for value in per_row:
            total += value
        assert report["summary"]["total_earnings_usd"] == rs.round2(total)

    def test_summary_and_context(self, now):
        params = P.royalty_params("30d", None, None, None, now=now)
        report = rs.shape_royalties(ARTIST_ROWS, params)
        assert report["success"] is True
        assert report["period"] == "last_30_days"
        assert report["rate_per_stream"] == "$0.01"
        assert report["generated_at"] == now.isoformat()
        assert report["summary"] == {
            "total_artists": 3,
            "total_streams": 51,
            "total_hours": 2.57,
            "total_earnings_usd": 0.51,
        }

    def test_empty_result(self, now):
        report = rs.shape_royalties([], P.royalty_params(None, None, None, None, now=now))
        assert report["data"] == []
        assert report["summary"]["total_earnings_usd"] == 0.0


class TestShapeCharts:

    def test_ranks_follow_store_order(self, now):
        rows = [
            {"_id": "s9", "song_title": "Tití Me Preguntó", "artist": "Bad Bunny", "play_count": 12},
            {"_id": "s2", "song_title": "Provenza", "artist": "Karol G", "play_count": 7},
        ]
        report = rs.shape_top_songs(rows, P.top_songs_params("gt", None, "2", now=now))
        assert report["region"] == "GT"
        assert report["period_days"] == 7
        assert [(r["rank"], r["song_id"], r["play_count"]) for r in report["data"]] == [
            (1, "s9", 12), (2, "s2", 7),
        ]


class TestShapeZombies:

    def test_counts_users_at_risk(self, now):
        rows = [{"user_id": "u1", "username": "ana", "email": "a@x.io", "subscription": "Premium",
                 "country": "GT", "last_activity": None}]
        report = rs.shape_zombies(rows, P.zombie_params("60", "All", None, now=now))
        assert report["inactive_days_threshold"] == 60
        assert report["subscription_filter"] == "All"
        assert report["total_at_risk"] == 1
        assert report["data"][0]["last_activity"] is None


class TestShapeDemographics:

    def test_percentages_and_total(self, now):
        rows = [
            {"age_range": "15-20", "stream_count": 5, "unique_users": 2},
            {"age_range": "21-30", "stream_count": 3, "unique_users": 3},
            {"age_range": "Unknown", "stream_count": 1, "unique_users": 1},
        ]
        report = rs.shape_genre_demographics(rows, P.genre_demographics_params("reggaeton", now=now))
        assert report["genre"] == "reggaeton"
        assert report["total_streams_analyzed"] == 9
        assert sum(r["stream_count"] for r in report["data"]) == 9
        assert [r["percentage"] for r in report["data"]] == ["55.56%", "33.33%", "11.11%"]
        total_pct = sum(float(r["percentage"].rstrip("%")) for r in report["data"])
        assert abs(total_pct - 100) < 0.05

    def test_no_matching_streams(self, now):
        report = rs.shape_genre_demographics([], P.genre_demographics_params("polka", now=now))
        assert report["total_streams_analyzed"] == 0
        assert report["data"] == []


class TestShapeTopFans:

    def test_rank_prepended(self, now):
        rows = [
            {"user_id": "u1", "username": "ana", "email": "a@x.io", "unique_songs_count": 3, "total_plays": 5},
            {"user_id": "u2", "username": "beto", "email": "b@x.io", "unique_songs_count": 1, "total_plays": 10},
        ]
        report = rs.shape_top_fans(rows, P.top_fans_params("Bad Bunny", None, now=now))
        assert report["artist"] == "Bad Bunny"
        assert [r["rank"] for r in report["data"]] == [1, 2]
        assert list(report["data"][0])[0] == "rank"


class TestReportService:

    def test_executes_plan_then_shapes(self, now):
        executor = FakeExecutor(rows=ARTIST_ROWS)
        service = ReportService(executor)
        report = asyncio.run(service.royalties(P.royalty_params(None, None, None, None, now=now)))
        assert len(executor.plans) == 1
        assert executor.plans[0].collection == "streams"
        assert report["summary"]["total_artists"] == 3

    def test_store_errors_propagate(self, now):
        service = ReportService(FakeExecutor(error=RuntimeError("connection refused")))
        with pytest.raises(RuntimeError):
            asyncio.run(service.top_fans(P.top_fans_params("Bad Bunny", None, now=now)))
