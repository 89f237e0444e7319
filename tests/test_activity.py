"""Tests for activity classification and the analytics summaries."""

from noor_journey.models import Position, ProgressRecord
from noor_journey.services.activity import (
    MS_PER_DAY,
    analytics_view,
    elapsed_days,
    is_active,
    is_behind,
    is_inactive,
    status_view,
    summarize,
    top_performers,
)
from noor_journey.services.ranking import rank

NOW = 1_760_000_000_000


def _record(name="A", *, juz=0, surah=1, ayah=1, age_ms=0):
    return ProgressRecord(
        member=name,
        position=Position(juz=juz, surah=surah, ayah=ayah),
        last_updated=NOW - age_ms,
    )


class TestElapsedDays:
    def test_floors(self):
        assert elapsed_days(NOW, NOW) == 0
        assert elapsed_days(NOW, NOW - MS_PER_DAY + 1) == 0
        assert elapsed_days(NOW, NOW - MS_PER_DAY) == 1
        assert elapsed_days(NOW, NOW - 10 * MS_PER_DAY - 5) == 10


class TestActivity:
    def test_seven_days_is_inactive(self):
        record = _record(age_ms=7 * MS_PER_DAY)
        assert is_inactive(record, NOW)
        assert not is_active(record, NOW)

    def test_just_under_seven_days_is_active(self):
        record = _record(age_ms=7 * MS_PER_DAY - 1)
        assert is_active(record, NOW)

    def test_fresh_default_is_active(self):
        record = ProgressRecord.default("A", NOW)
        assert is_active(record, NOW)

    def test_future_timestamp_counts_as_active(self):
        assert is_active(_record(age_ms=-MS_PER_DAY), NOW)


class TestBehind:
    def test_boundary(self):
        assert is_behind(_record(juz=9))
        assert not is_behind(_record(juz=10))

    def test_behind_is_independent_of_activity(self):
        record = _record(juz=2)
        assert is_behind(record) and is_active(record, NOW)


class TestTopPerformers:
    def test_excludes_zero_juz(self):
        records = {
            "A": _record("A", juz=0, surah=114),
            "B": _record("B", juz=1),
        }
        assert [entry.member for entry in top_performers(rank(records))] == ["B"]

    def test_at_most_three(self):
        records = {name: _record(name, juz=juz) for name, juz in zip("ABCDE", [5, 4, 3, 2, 1])}
        assert [entry.member for entry in top_performers(rank(records))] == ["A", "B", "C"]

    def test_nobody_with_progress(self):
        records = {name: _record(name) for name in "AB"}
        assert top_performers(rank(records)) == []


class TestSummary:
    def _snapshot(self):
        return {
            "A": _record("A", juz=12, age_ms=1 * MS_PER_DAY),
            "B": _record("B", juz=3, age_ms=8 * MS_PER_DAY),
            "C": _record("C", juz=1, age_ms=20 * MS_PER_DAY),
            "D": _record("D", juz=25),
        }

    def test_groups(self):
        summary = summarize(self._snapshot(), NOW)

        assert [s.member for s in summary.active] == ["A", "D"]
        assert [s.member for s in summary.inactive] == ["C", "B"]
        assert [s.member for s in summary.behind] == ["C", "B"]
        assert [e.member for e in summary.top_performers] == ["D", "A", "B"]
        assert [e.rank for e in summary.leaderboard] == [1, 2, 3, 4]

    def test_analytics_view_limits(self):
        snapshot = {
            str(i): _record(str(i), juz=i, age_ms=(7 + i) * MS_PER_DAY) for i in range(8)
        }
        view = analytics_view(summarize(snapshot, NOW))

        assert [m["name"] for m in view["behind"]] == ["0", "1", "2", "3", "4"]
        assert [m["name"] for m in view["inactive"]] == ["7", "6", "5", "4", "3"]
        assert [m["name"] for m in view["topPerformers"]] == ["7", "6", "5"]

    def test_status_view(self):
        view = status_view(summarize(self._snapshot(), NOW))

        assert view["activeCount"] == 2
        assert view["inactiveCount"] == 2
        assert view["inactive"][0] == {
            "name": "C",
            "juz": 1,
            "surah": 1,
            "ayah": 1,
            "lastUpdated": NOW - 20 * MS_PER_DAY,
            "daysSinceUpdate": 20,
            "active": False,
            "behind": True,
        }
