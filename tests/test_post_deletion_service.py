"""Tests for post deletion with asset cleanup and retries."""

import random
from unittest.mock import AsyncMock

import pytest

from app.modules.community.domain.models.asset import BucketName
from app.modules.community.domain.models.record import RecordTable
from app.modules.community.domain.services.post_deletion_service import PostDeletionService
from app.modules.community.domain.services.storage_cleanup_service import StorageCleanupService
from app.shared.core.exceptions import AuthorizationError, NotFoundError, RepositoryError
from app.shared.core.sync_retry import RetryConfig, SyncRetryService

from .conftest import public_url


@pytest.fixture
def retry_service(clock, no_sleep) -> SyncRetryService:
    return SyncRetryService(
        default_config=RetryConfig(jitter=False),
        clock=clock,
        sleep=no_sleep,
        rng=random.Random(1),
    )


@pytest.fixture
def cleanup_service(record_store, object_store, test_settings, clock) -> StorageCleanupService:
    return StorageCleanupService(record_store, object_store, settings=test_settings, clock=clock)


@pytest.fixture
def service(record_store, cleanup_service, retry_service, test_settings) -> PostDeletionService:
    return PostDeletionService(record_store, cleanup_service, retry_service, settings=test_settings)


def add_question(record_store, object_store, post_id="q1", user_id="u1"):
    path = f"{user_id}/{post_id}.jpg"
    record_store.add(
        RecordTable.COMMUNITY_QUESTIONS,
        id=post_id,
        user_id=user_id,
        image_url=public_url("community-questions", path),
    )
    object_store.put(BucketName.COMMUNITY_QUESTIONS, path)
    return path


@pytest.mark.asyncio
async def test_delete_post_removes_assets_and_row(service, record_store, object_store):
    path = add_question(record_store, object_store)

    result = await service.delete_post("q1", "u1")

    assert result.deleted_assets == [path]
    assert record_store.rows[RecordTable.COMMUNITY_QUESTIONS] == []
    assert object_store.paths(BucketName.COMMUNITY_QUESTIONS) == []


@pytest.mark.asyncio
async def test_delete_plant_share(service, record_store, object_store):
    record_store.add(
        RecordTable.COMMUNITY_PLANT_SHARES,
        id="s1",
        user_id="u1",
        images_urls=[public_url("community-plant-shares", "u1/s1.jpg")],
    )
    object_store.put(BucketName.COMMUNITY_PLANT_SHARES, "u1/s1.jpg")

    await service.delete_post("s1", "u1")

    assert record_store.deleted == [(RecordTable.COMMUNITY_PLANT_SHARES, "s1")]


@pytest.mark.asyncio
async def test_missing_post_raises_not_found(service):
    with pytest.raises(NotFoundError):
        await service.delete_post("missing", "u1")


@pytest.mark.asyncio
async def test_foreign_post_raises_authorization_error(service, record_store, object_store):
    path = add_question(record_store, object_store, user_id="u2")

    with pytest.raises(AuthorizationError):
        await service.delete_post("q1", "u1")

    assert record_store.deleted == []
    assert object_store.paths(BucketName.COMMUNITY_QUESTIONS) == [path]


@pytest.mark.asyncio
async def test_cleanup_errors_do_not_block_row_deletion(service, record_store, object_store):
    add_question(record_store, object_store)
    object_store.remove_failures[1] = RuntimeError("storage unavailable")

    result = await service.delete_post("q1", "u1")

    assert len(result.errors) == 1
    assert record_store.deleted == [(RecordTable.COMMUNITY_QUESTIONS, "q1")]


@pytest.mark.asyncio
async def test_cleanup_exception_does_not_block_row_deletion(record_store, retry_service, test_settings):
    record_store.add(RecordTable.COMMUNITY_QUESTIONS, id="q1", user_id="u1")
    cleanup_service = AsyncMock()
    cleanup_service.cleanup_post_assets.side_effect = RuntimeError("boom")
    service = PostDeletionService(record_store, cleanup_service, retry_service, settings=test_settings)

    result = await service.delete_post("q1", "u1")

    assert result.errors == ["boom"]
    assert record_store.deleted == [(RecordTable.COMMUNITY_QUESTIONS, "q1")]


@pytest.mark.asyncio
async def test_row_deletion_is_retried(service, record_store, object_store, no_sleep):
    add_question(record_store, object_store)
    record_store.delete_failures = [RepositoryError("conn reset"), RepositoryError("conn reset")]

    await service.delete_post("q1", "u1")

    assert record_store.deleted == [(RecordTable.COMMUNITY_QUESTIONS, "q1")]
    assert len(no_sleep.delays) == 2


@pytest.mark.asyncio
async def test_row_deletion_gives_up_after_max_retries(service, record_store, object_store, retry_service):
    add_question(record_store, object_store)
    record_store.delete_failures = [RepositoryError("down")] * 3

    with pytest.raises(RepositoryError):
        await service.delete_post("q1", "u1")

    assert retry_service.get_active_operations() == {}


@pytest.mark.asyncio
async def test_batch_delete_isolates_failures(service, record_store, object_store):
    add_question(record_store, object_store, post_id="q1")
    add_question(record_store, object_store, post_id="q2")
    add_question(record_store, object_store, post_id="theirs", user_id="u2")

    report = await service.batch_delete_posts(["q1", "missing", "q2", "theirs", "q1"], "u1")

    assert sorted(report.deleted) == ["q1", "q2"]
    assert set(report.failed) == {"missing", "theirs"}
    assert "not found" in report.failed["missing"]
