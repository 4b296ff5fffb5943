"""
Tests for bounded usage tracking
"""
from datetime import timedelta
from unittest.mock import Mock

from a11ytool.core.models import PackageInfo
from a11ytool.core.storage import USAGE_KEY, FileStorage
from a11ytool.core.usage_tracker import UsageTracker


def test_first_record_initializes_history(storage, clock, package_info):
    tracker = UsageTracker(storage, clock=clock)
    tracker.record(package_info, "HTTPS://Example.com/page")

    usage = tracker.read()
    assert usage.first_used == clock.now
    assert usage.last_used == clock.now
    assert usage.package_name == "a11y-tool"
    assert usage.package_version == "1.0.4"
    assert usage.domain == "example.com"
    assert [u.domain for u in usage.uses] == ["example.com"]


def test_later_records_keep_first_used(storage, clock, package_info):
    tracker = UsageTracker(storage, clock=clock)
    start = clock.now
    tracker.record(package_info, "a.example")
    clock.advance(minutes=5)
    tracker.record(PackageInfo(name="a11y-tool", version="2.0.0"), "b.example")

    usage = tracker.read()
    assert usage.first_used == start
    assert usage.last_used == clock.now
    assert usage.package_version == "2.0.0"
    assert usage.domain == "b.example"


def test_history_is_bounded_to_most_recent(storage, clock, package_info):
    """Test FIFO eviction after more than 100 uses"""
    tracker = UsageTracker(storage, clock=clock)
    start = clock.now
    for _ in range(150):
        tracker.record(package_info, "example.com")
        clock.advance(seconds=1)

    uses = tracker.read().uses
    assert len(uses) == 100
    assert uses[0].timestamp == start + timedelta(seconds=50)
    assert uses[-1].timestamp == start + timedelta(seconds=149)
    assert [u.timestamp for u in uses] == sorted(u.timestamp for u in uses)


def test_custom_bound(storage, clock, package_info):
    tracker = UsageTracker(storage, max_entries=3, clock=clock)
    for _ in range(5):
        tracker.record(package_info, "example.com")
    assert len(tracker.read().uses) == 3


def test_record_without_package_info(storage, clock):
    tracker = UsageTracker(storage, clock=clock)
    tracker.record(None, None)
    usage = tracker.read()
    assert usage.package_name == "unknown"
    assert usage.domain is None


def test_persisted_record_uses_camel_case(storage, clock, package_info):
    UsageTracker(storage, clock=clock).record(package_info, "example.com")
    record = storage.read(USAGE_KEY)
    assert set(record) == {"firstUsed", "lastUsed", "packageName", "packageVersion", "domain", "uses"}
    assert set(record["uses"][0]) == {"timestamp", "domain"}


def test_corrupt_history_starts_over(tmp_path, clock, package_info):
    storage = FileStorage(tmp_path)
    storage.path_for(USAGE_KEY).write_text('{"uses": "nope"}')
    tracker = UsageTracker(storage, clock=clock)
    tracker.record(package_info, "example.com")
    assert len(tracker.read().uses) == 1


def test_write_failures_are_swallowed(tmp_path, clock, package_info):
    tracker = UsageTracker(FileStorage(tmp_path / "missing"), clock=clock)
    tracker.record(package_info, "example.com")
    assert tracker.read() is None


def test_clear(storage, clock, package_info):
    tracker = UsageTracker(storage, clock=clock)
    tracker.record(package_info, "example.com")
    tracker.clear()
    assert tracker.read() is None
    tracker.record(package_info, "example.com")
    tracker.clear(purge=True)
    assert storage.read(USAGE_KEY) is None


def test_undecodable_history_starts_over(tmp_path, clock, package_info):
    storage = FileStorage(tmp_path)
    storage.path_for(USAGE_KEY).write_bytes(b"\xff\xfe{garbage")
    tracker = UsageTracker(storage, clock=clock)

    assert tracker.read() is None
    tracker.record(package_info, "example.com")
    assert len(tracker.read().uses) == 1


def test_unexpected_storage_errors_are_contained(clock, package_info):
    storage = Mock()
    storage.read.side_effect = RuntimeError("disk on fire")
    storage.write.side_effect = RuntimeError("disk on fire")
    tracker = UsageTracker(storage, clock=clock)

    tracker.record(package_info, "example.com")
    tracker.clear()
    assert tracker.read() is None
