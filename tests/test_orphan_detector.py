"""Unit tests for orphan detection."""

from datetime import timedelta

import pytest

from app.modules.community.domain.models.asset import BucketName, StorageObjectMeta
from app.modules.community.domain.services.orphan_detector import OrphanDetector, full_path_for

from .conftest import NOW

THRESHOLD = timedelta(hours=24)


def listed(name, age=timedelta(days=2), bucket=BucketName.POSTS, naive=False):
    stamp = NOW - age if age is not None else None
    if stamp is not None and naive:
        stamp = stamp.replace(tzinfo=None)
    return StorageObjectMeta(name=name, bucket=bucket, created_at=stamp, updated_at=stamp)


@pytest.fixture
def detector(clock) -> OrphanDetector:
    return OrphanDetector(clock)


def test_unreferenced_old_object_is_orphan(detector):
    orphans = detector.find_orphans("u1", [listed("a.jpg")], set(), THRESHOLD)
    assert [o.name for o in orphans] == ["a.jpg"]


def test_referenced_object_is_kept(detector):
    orphans = detector.find_orphans("u1", [listed("a.jpg")], {"u1/a.jpg"}, THRESHOLD)
    assert orphans == []


def test_all_referenced_yields_nothing(detector):
    assets = [listed("a.jpg"), listed("b.jpg"), listed("c.jpg")]
    referenced = {"u1/a.jpg", "u1/b.jpg", "u1/c.jpg"}
    assert detector.find_orphans("u1", assets, referenced, THRESHOLD) == []


def test_young_object_is_never_orphan(detector):
    assets = [listed("new.jpg", age=timedelta(hours=1)), listed("edge.jpg", age=THRESHOLD)]
    assert detector.find_orphans("u1", assets, set(), THRESHOLD) == []


def test_recent_update_resets_age(detector):
    asset = StorageObjectMeta(
        name="a.jpg",
        bucket=BucketName.POSTS,
        created_at=NOW - timedelta(days=30),
        updated_at=NOW - timedelta(hours=2),
    )
    assert detector.find_orphans("u1", [asset], set(), THRESHOLD) == []


def test_objects_without_timestamps_or_names_are_skipped(detector):
    assets = [listed("folder", age=None), StorageObjectMeta(bucket=BucketName.POSTS)]
    assert detector.find_orphans("u1", assets, set(), THRESHOLD) == []


def test_traversal_names_are_skipped(detector):
    assert detector.find_orphans("u1", [listed("../u2/a.jpg")], set(), THRESHOLD) == []


def test_naive_timestamps_are_treated_as_utc(detector):
    orphans = detector.find_orphans("u1", [listed("a.jpg", naive=True)], set(), THRESHOLD)
    assert len(orphans) == 1


def test_explicit_now_overrides_clock(detector):
    asset = listed("a.jpg", age=timedelta(hours=2))
    later = NOW + timedelta(days=1)
    assert len(detector.find_orphans("u1", [asset], set(), THRESHOLD, now=later)) == 1


def test_full_path_is_normalized():
    assert full_path_for("u1", listed("/a.jpg")) == "u1/a.jpg"
