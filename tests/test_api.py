"""API tests for the community post and storage maintenance endpoints.

Handlers are replaced through dependency_overrides; no Supabase calls are made.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.main import app
from app.modules.community.domain.models.asset import CleanupResult
from app.modules.community.domain.services.post_deletion_service import BatchDeletionReport
from app.modules.community.presentation.dependencies import (
    get_batch_delete_posts_handler,
    get_delete_post_handler,
    get_sweep_orphans_handler,
)
from app.shared.config.settings import get_settings
from app.shared.core.dependencies import CurrentUser, get_current_user
from app.shared.core.exceptions import AuthorizationError, NotFoundError, ReferenceScanError
from app.shared.core.sync_retry import SyncRetryService, get_sync_retry_service


def make_token(sub="u1", expires_in=timedelta(hours=1), audience="authenticated", secret=None):
    claims = {
        "sub": sub,
        "aud": audience,
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, secret or get_settings().SUPABASE_JWT_SECRET, algorithm="HS256")


def handler_returning(value=None, error=None):
    handler = MagicMock()
    handler.handle = AsyncMock(return_value=value, side_effect=error)
    return handler


@pytest.fixture
def client():
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def authenticated(client):
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(user_id="u1")
    return client


class TestDeletePost:
    def test_success_returns_204(self, authenticated):
        handler = handler_returning(CleanupResult(deleted_assets=["u1/a.jpg"]))
        app.dependency_overrides[get_delete_post_handler] = lambda: handler

        response = authenticated.delete("/api/v1/community/posts/q1")

        assert response.status_code == 204
        command = handler.handle.await_args.args[0]
        assert command.post_id == "q1"
        assert command.user_id == "u1"

    def test_not_found(self, authenticated):
        handler = handler_returning(error=NotFoundError("Post q1 not found", "community_post", "q1"))
        app.dependency_overrides[get_delete_post_handler] = lambda: handler

        response = authenticated.delete("/api/v1/community/posts/q1")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_foreign_post_is_forbidden(self, authenticated):
        error = AuthorizationError("Unauthorized to delete this post", "community_questions", "q1", "u1")
        app.dependency_overrides[get_delete_post_handler] = lambda: handler_returning(error=error)

        response = authenticated.delete("/api/v1/community/posts/q1")

        assert response.status_code == 403

    def test_requires_authentication(self, client):
        app.dependency_overrides[get_delete_post_handler] = lambda: handler_returning(CleanupResult())

        response = client.delete("/api/v1/community/posts/q1")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


class TestBatchDelete:
    def test_reports_per_post_outcome(self, authenticated):
        report = BatchDeletionReport(deleted=["q1"], failed={"q2": "Post q2 not found"})
        handler = handler_returning(report)
        app.dependency_overrides[get_batch_delete_posts_handler] = lambda: handler

        response = authenticated.post(
            "/api/v1/community/posts/batch-delete", json={"post_ids": ["q1", " q2 "]}
        )

        assert response.status_code == 200
        assert response.json() == {"deleted": ["q1"], "failed": {"q2": "Post q2 not found"}}
        assert handler.handle.await_args.args[0].post_ids == ["q1", "q2"]

    def test_empty_list_is_rejected(self, authenticated):
        app.dependency_overrides[get_batch_delete_posts_handler] = lambda: handler_returning()

        response = authenticated.post("/api/v1/community/posts/batch-delete", json={"post_ids": []})

        assert response.status_code == 422


class TestOrphanSweep:
    def test_returns_cleanup_result(self, authenticated):
        result = CleanupResult(deleted_assets=["u1/a.jpg", "u1/b.jpg"], errors=["List failed for posts"], total_size=30)
        handler = handler_returning(result)
        app.dependency_overrides[get_sweep_orphans_handler] = lambda: handler

        response = authenticated.post("/api/v1/storage/cleanup/orphans")

        assert response.status_code == 200
        body = response.json()
        assert body["deleted_count"] == 2
        assert body["total_size"] == 30
        assert body["errors"] == ["List failed for posts"]
        command = handler.handle.await_args.args[0]
        assert command.user_id == "u1"
        assert command.triggered_by == "api"

    def test_scan_failure_is_service_unavailable(self, authenticated):
        error = ReferenceScanError("u1", {"profiles": "timeout"})
        app.dependency_overrides[get_sweep_orphans_handler] = lambda: handler_returning(error=error)

        response = authenticated.post("/api/v1/storage/cleanup/orphans")

        assert response.status_code == 503
        assert response.json()["error"]["details"]["failed_tables"] == {"profiles": "timeout"}


class TestSyncOperations:
    def test_lists_active_operations(self, authenticated):
        app.dependency_overrides[get_sync_retry_service] = lambda: SyncRetryService()

        response = authenticated.get("/api/v1/storage/sync/operations")

        assert response.status_code == 200
        assert response.json() == {"active_operations": 0, "operation_details": {}}


class TestBearerTokens:
    def test_valid_token_identifies_user(self, client):
        handler = handler_returning(CleanupResult())
        app.dependency_overrides[get_delete_post_handler] = lambda: handler

        response = client.delete(
            "/api/v1/community/posts/q1", headers={"Authorization": f"Bearer {make_token(sub='u42')}"}
        )

        assert response.status_code == 204
        assert handler.handle.await_args.args[0].user_id == "u42"

    @pytest.mark.parametrize("token_kwargs", [
        {"expires_in": timedelta(minutes=-5)},
        {"audience": "anon"},
        {"secret": "wrong-secret-wrong-secret-wrong"},
    ])
    def test_invalid_tokens_are_rejected(self, client, token_kwargs):
        app.dependency_overrides[get_delete_post_handler] = lambda: handler_returning(CleanupResult())

        response = client.delete(
            "/api/v1/community/posts/q1", headers={"Authorization": f"Bearer {make_token(**token_kwargs)}"}
        )

        assert response.status_code == 401


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
