"""
Ownership validation for storage paths.
A path may only be scanned or deleted on behalf of the user whose id is its first segment.
"""

from app.shared.utils.logging import get_logger

from .path_resolver import normalize

logger = get_logger(__name__)


def is_owned_by(path, user_id) -> bool:
    """
    True iff `path` is safely attributable to `user_id`.

    The normalized path must start with "<user_id>/", have a non-empty remainder,
    and contain neither '..' nor '//'. Empty user ids and ids containing '/' never
    own anything. Returns False (with a warning) instead of raising.
    """
    if not isinstance(user_id, str) or not user_id or "/" in user_id:
        logger.warning(
            "Rejected ownership check for invalid user id",
            extra={'user_id': repr(user_id), 'path': repr(path)}
        )
        return False

    normalized = normalize(path)
    expected_prefix = f"{user_id}/"

    owned = (
        normalized.startswith(expected_prefix)
        and len(normalized) > len(expected_prefix)
        and ".." not in normalized
        and "//" not in normalized
    )

    if not owned:
        logger.warning(
            f"Path failed ownership validation for user {user_id}",
            extra={'user_id': user_id, 'path': normalized or repr(path)}
        )

    return owned

