# 📄 File: app/modules/community/domain/services/path_resolver.py
# 🧭 Purpose (Layman Explanation):
# Turns the photo links saved in posts and profiles into the short "folder/file" names the storage
# service understands, and cleans those names up so the same photo is always written the same way.
# 🧪 Purpose (Technical Summary):
# Pure functions that extract storage-relative paths from public object URLs, bare relative paths
# and free-text content, and normalize them to one canonical form. Every path comparison in the
# cleanup subsystem goes through normalize().
# 🔗 Dependencies:
# re, urllib.parse, typing, BucketName / LocatedPath value objects
# 🔄 Connected Modules / Calls From:
# ownership, bucket_router, reference_scanner, orphan_detector, storage_cleanup_service

import re
from typing import List, Optional
from urllib.parse import unquote

from ..models.asset import BucketName, LocatedPath

# <anything>/object/public/<bucket>/<rest>; query string and fragment are not part of <rest>
_PUBLIC_URL_PATTERN = re.compile(
    r"/object/public/(?P<bucket>[^/?#\s]+)/(?P<rest>[^?#]+)"
)

# Same shape inside free text; a match ends at quotes, whitespace, ')', '<', '>', '?' or '#'
_EMBEDDED_URL_PATTERN = re.compile(
    r"/object/public/(?P<bucket>[^/?#\s\"'()<>]+)/(?P<rest>[^\s\"'()<>?#]+)"
)

_URI_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_REPEATED_SEPARATORS = re.compile(r"/{2,}")


def extract_located_path(url_or_path) -> Optional[LocatedPath]:
    """
    Extract a storage-relative path and, when present, the bucket it came from.

    A public object URL with a known bucket yields the percent-decoded `<rest>` plus
    that bucket. A bare relative path (contains '/', no URI scheme) is already an
    object name and is returned verbatim with no bucket.
    Anything else, including non-strings, yields None. Never raises.
    """
    if not isinstance(url_or_path, str):
        return None

    candidate = url_or_path.strip()
    if not candidate:
        return None

    if "/object/public/" in candidate:
        match = _PUBLIC_URL_PATTERN.search(candidate)
        if not match:
            return None
        bucket = BucketName.parse(match.group("bucket"))
        # public URLs are percent-encoded, listings return raw object names
        rest = unquote(match.group("rest"))
        if not bucket.is_known or not rest:
            return None
        return LocatedPath(path=rest, bucket=bucket)

    if "/" in candidate and not _URI_SCHEME_PATTERN.match(candidate):
        return LocatedPath(path=url_or_path)

    return None


def extract_path(url_or_path) -> Optional[str]:
    """Storage-relative path for a stored URL or raw path, or None when there is none."""
    located = extract_located_path(url_or_path)
    return located.path if located else None


def normalize(path) -> str:
    """
    Canonical form of a storage path.

    Trims whitespace, converts backslashes to forward slashes, collapses repeated
    separators and strips leading and trailing separators. Idempotent; anything
    that is not a non-empty string normalizes to "".
    """
    if not isinstance(path, str):
        return ""

    current = path
    while True:
        cleaned = current.strip().replace("\\", "/")
        cleaned = _REPEATED_SEPARATORS.sub("/", cleaned)
        cleaned = cleaned.strip("/")
        if cleaned == current:
            return cleaned
        current = cleaned


def extract_embedded(content) -> List[LocatedPath]:
    """Every known-bucket public URL occurring in free text, normalized, in order of appearance."""
    if not isinstance(content, str) or "/object/public/" not in content:
        return []

    found: List[LocatedPath] = []
    for match in _EMBEDDED_URL_PATTERN.finditer(content):
        bucket = BucketName.parse(match.group("bucket"))
        if not bucket.is_known:
            continue
        path = normalize(unquote(match.group("rest")))
        if path:
            found.append(LocatedPath(path=path, bucket=bucket))
    return found

