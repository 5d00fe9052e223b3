from datetime import datetime, timezone

from music_analytics.scripts.import_master_data import parse_date, prepare_document
from music_analytics.scripts.run_reports import reference_reports


class TestPrepareDocument:

    def test_id_normalized_to_string(self):
        doc = prepare_document({"id": 42, "name": "Bad Bunny"})
        assert doc == {"name": "Bad Bunny", "_id": "42"}

    def test_missing_id_skipped(self):
        assert prepare_document({"name": "nobody"}) is None

    def test_date_fields_parsed(self):
        doc = prepare_document(
            {"_id": "st1", "date": "2024-05-01T10:00:00Z", "seconds_played": 180},
            ("date",),
        )
        assert doc["date"] == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert doc["seconds_played"] == 180


class TestParseDate:

    def test_naive_iso_is_utc(self):
        assert parse_date("1999-12-31").tzinfo == timezone.utc

    def test_epoch_milliseconds(self):
        assert parse_date(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_none_passthrough(self):
        assert parse_date(None) is None


class RecordingSyncExecutor:

    def __init__(self):
        self.plans = []

    def execute(self, plan):
        self.plans.append(plan)
        return []


class TestReferenceReports:

    def test_runs_all_five_reports(self):
        executor = RecordingSyncExecutor()
        reports = reference_reports(executor)
        assert list(reports) == [
            "royalties", "top_songs_gt", "zombie_users", "reggaeton_demographics", "bad_bunny_top_fans",
        ]
        assert all(report["success"] for report in reports.values())
        assert reports["top_songs_gt"]["region"] == "GT"
        assert reports["bad_bunny_top_fans"]["artist"] == "Bad Bunny"
        assert [plan.collection for plan in executor.plans] == [
            "streams", "streams", "users", "streams", "streams",
        ]
