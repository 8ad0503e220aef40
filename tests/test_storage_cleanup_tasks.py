"""Tests for the scheduled orphan sweep tasks.

Tasks are called directly, which runs them in-process without a broker.
"""

from unittest.mock import AsyncMock, MagicMock, patch

from app.background_jobs.tasks import storage_cleanup
from app.modules.community.domain.models.asset import BucketName
from app.modules.community.domain.models.record import RecordTable


def test_sweep_all_fans_out_per_owner():
    with patch.object(storage_cleanup, "list_sweep_owners", AsyncMock(return_value=["u1", "u2"])), \
            patch.object(storage_cleanup.sweep_orphaned_assets_for_user, "delay") as delay:
        result = storage_cleanup.sweep_all_orphaned_assets()

    assert result == {"scheduled": 2}
    assert [call.args for call in delay.call_args_list] == [("u1",), ("u2",)]


def test_sweep_for_user_returns_serializable_result():
    swept = {"deleted_assets": ["u1/a.jpg"], "errors": [], "total_size": 10}
    with patch.object(storage_cleanup, "run_user_sweep", AsyncMock(return_value=swept)) as run:
        result = storage_cleanup.sweep_orphaned_assets_for_user("u1")

    assert result == swept
    run.assert_awaited_once_with("u1")


def test_run_user_sweep_wires_stores(record_store, object_store):
    object_store.put(BucketName.POSTS, "u1/old_post_1.jpg", size=3)
    manager = MagicMock()
    manager.get_client = AsyncMock(return_value=MagicMock())
    manager.close = AsyncMock()

    with patch.object(storage_cleanup, "SupabaseManager", return_value=manager), \
            patch.object(storage_cleanup, "SupabaseRecordStore", return_value=record_store), \
            patch.object(storage_cleanup, "SupabaseObjectStore", return_value=object_store):
        result = storage_cleanup.sweep_orphaned_assets_for_user("u1")

    assert result["deleted_assets"] == ["u1/old_post_1.jpg"]
    manager.close.assert_awaited_once()


def test_list_sweep_owners_merges_tables(record_store):
    record_store.add(RecordTable.PROFILES, user_id="u1")
    record_store.add(RecordTable.COMMUNITY_QUESTIONS, id="q1", user_id="u2")
    record_store.add(RecordTable.COMMUNITY_PLANT_SHARES, id="s1", user_id="u1")
    manager = MagicMock()
    manager.get_client = AsyncMock(return_value=MagicMock())
    manager.close = AsyncMock()

    with patch.object(storage_cleanup, "SupabaseManager", return_value=manager), \
            patch.object(storage_cleanup, "SupabaseRecordStore", return_value=record_store):
        with patch.object(storage_cleanup.sweep_orphaned_assets_for_user, "delay") as delay:
            result = storage_cleanup.sweep_all_orphaned_assets()

    assert result == {"scheduled": 2}
    assert sorted(call.args[0] for call in delay.call_args_list) == ["u1", "u2"]
    manager.close.assert_awaited_once()
