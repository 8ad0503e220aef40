"""Unit tests for reference scanning across record tables."""

import pytest

from app.modules.community.domain.models.asset import BucketName
from app.modules.community.domain.models.record import RecordTable
from app.modules.community.domain.services.reference_scanner import ReferenceScanner
from app.shared.core.exceptions import ReferenceScanError, RepositoryError

from .conftest import public_url


@pytest.fixture
def scanner(record_store) -> ReferenceScanner:
    return ReferenceScanner(record_store)


@pytest.mark.asyncio
async def test_question_references(scanner, record_store):
    record_store.add(
        RecordTable.COMMUNITY_QUESTIONS,
        id="q1",
        user_id="u1",
        image_url=public_url("community-questions", "u1/a.jpg"),
        content=f"see {public_url('community-questions', 'u1/b.jpg')}",
    )

    assets = await scanner.scan_for_record("q1", "u1")

    assert {a.path for a in assets} == {"u1/a.jpg", "u1/b.jpg"}
    assert all(a.bucket is BucketName.COMMUNITY_QUESTIONS for a in assets)
    assert all(a.source_table == "community_questions" for a in assets)
    assert all(a.source_record_id == "q1" for a in assets)


@pytest.mark.asyncio
async def test_plant_share_array_references(scanner, record_store):
    record_store.add(
        RecordTable.COMMUNITY_PLANT_SHARES,
        id="s1",
        user_id="u1",
        images_urls=[
            public_url("community-plant-shares", "u1/1.jpg"),
            "u1/2.jpg",
            None,
            "not-a-path",
        ],
        content=None,
    )

    assets = await scanner.scan_for_record("s1", "u1")

    by_path = {a.path: a for a in assets}
    assert set(by_path) == {"u1/1.jpg", "u1/2.jpg"}
    assert by_path["u1/1.jpg"].bucket is BucketName.COMMUNITY_PLANT_SHARES
    assert by_path["u1/2.jpg"].bucket is None


@pytest.mark.asyncio
async def test_cross_user_urls_are_ignored(scanner, record_store):
    record_store.add(
        RecordTable.COMMUNITY_QUESTIONS,
        id="q1",
        user_id="u1",
        image_url=public_url("community-questions", "u2/victim.jpg"),
        content=(
            f"{public_url('posts', 'u2/other.jpg')} "
            f"{public_url('posts', 'u1/../u2/sneaky.jpg')}"
        ),
    )

    assert await scanner.scan_for_record("q1", "u1") == []


@pytest.mark.asyncio
async def test_duplicate_paths_prefer_known_bucket(scanner, record_store):
    record_store.add(
        RecordTable.COMMUNITY_QUESTIONS,
        id="q1",
        user_id="u1",
        image_url="u1/a.jpg",
        content=f"again {public_url('community-questions', 'u1/a.jpg')}",
    )

    assets = await scanner.scan_for_record("q1", "u1")

    assert len(assets) == 1
    assert assets[0].bucket is BucketName.COMMUNITY_QUESTIONS


@pytest.mark.asyncio
async def test_missing_or_foreign_record_scans_empty(scanner, record_store):
    record_store.add(RecordTable.COMMUNITY_QUESTIONS, id="q1", user_id="u2", image_url="u2/a.jpg")

    assert await scanner.scan_for_record("q1", "u1") == []
    assert await scanner.scan_for_record("missing", "u1") == []


@pytest.mark.asyncio
async def test_scan_for_record_propagates_store_errors(scanner, record_store):
    record_store.read_failures[RecordTable.COMMUNITY_QUESTIONS] = RepositoryError("down")

    with pytest.raises(RepositoryError):
        await scanner.scan_for_record("q1", "u1")


@pytest.mark.asyncio
async def test_scan_all_covers_every_table(scanner, record_store):
    record_store.add(RecordTable.COMMUNITY_QUESTIONS, id="q1", user_id="u1", image_url="u1/q.jpg")
    record_store.add(RecordTable.COMMUNITY_PLANT_SHARES, id="s1", user_id="u1", images_urls=["u1/s.jpg"])
    record_store.add(RecordTable.PROFILES, user_id="u1", avatar_url=public_url("avatars", "u1/me.png"))
    record_store.add(RecordTable.COMMUNITY_QUESTIONS, id="q2", user_id="u2", image_url="u2/x.jpg")

    referenced = await scanner.scan_all_for_user("u1")

    assert referenced == {
        "u1/q.jpg": "community_questions",
        "u1/s.jpg": "community_plant_shares",
        "u1/me.png": "profiles",
    }


@pytest.mark.asyncio
async def test_scan_all_fails_closed(scanner, record_store):
    record_store.add(RecordTable.COMMUNITY_QUESTIONS, id="q1", user_id="u1", image_url="u1/q.jpg")
    record_store.read_failures[RecordTable.PROFILES] = RepositoryError("timeout")

    with pytest.raises(ReferenceScanError) as exc_info:
        await scanner.scan_all_for_user("u1")

    assert set(exc_info.value.failed_tables) == {"profiles"}
