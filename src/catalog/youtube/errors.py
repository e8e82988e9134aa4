"""
errors.py

HTTP / transport failure → domain error translation for the YouTube adapter.
No retries happen here; retry policy belongs to whoever calls the service.
"""

from __future__ import annotations

import json
import socket
from typing import Optional

import httplib2
from google.auth.exceptions import GoogleAuthError, RefreshError
from googleapiclient.errors import HttpError

from auth.errors import AuthInvalid
from playlists.context import CallContext
from playlists.errors import DeadlineExceeded, QuotaExhausted, RemoteUnavailable

QUOTA_REASONS = ("quotaExceeded", "dailyLimitExceeded")

# Failures that come from the remote side or the wire. Anything else raised
# while building or executing a request is a bug and must propagate.
REMOTE_ERRORS = (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


def _is_quota_payload(data: dict) -> bool:
    """
    YouTube quota errors are reliably signaled here:
    error.errors[].reason in ('quotaExceeded', 'dailyLimitExceeded')
    """
    try:
        for err in data.get("error", {}).get("errors", []):
            if err.get("reason") in QUOTA_REASONS:
                return True
    except AttributeError:
        pass
    return False


def http_reason(e: HttpError) -> str:
    try:
        body = e.content.decode("utf-8", errors="replace") if e.content else ""
    except AttributeError:
        body = str(e.content or "")
    return body[:300] or str(e)


def classify_http_error(e: HttpError) -> str:
    """
    Returns: 'quota', 'auth', or 'other'
    """
    # First try structured error_details
    details = getattr(e, "error_details", None)
    if isinstance(details, list):
        for d in details:
            if isinstance(d, dict) and d.get("reason") in QUOTA_REASONS:
                return "quota"

    # Then try raw HTTP content (googleapiclient puts JSON here often)
    raw = http_reason(e)
    try:
        if _is_quota_payload(json.loads(raw)):
            return "quota"
    except ValueError:
        if "quotaexceeded" in raw.lower() or "dailylimit" in raw.lower():
            return "quota"

    if getattr(e, "status_code", None) == 401 or getattr(e.resp, "status", None) == 401:
        return "auth"

    return "other"


def translate_error(
    e: Exception, operation: str, ctx: Optional[CallContext] = None
) -> RemoteUnavailable:
    """Map one of REMOTE_ERRORS (or a domain error) to the domain taxonomy."""
    if isinstance(e, RemoteUnavailable):
        return e

    if isinstance(e, HttpError):
        kind = classify_http_error(e)
        if kind == "quota":
            return QuotaExhausted(f"{operation}: API quota exhausted")
        if kind == "auth":
            return AuthInvalid(f"{operation}: {http_reason(e)}")
        status = getattr(e.resp, "status", "?")
        return RemoteUnavailable(f"{operation}: HTTP {status}: {http_reason(e)}")

    if isinstance(e, RefreshError):
        return AuthInvalid(f"{operation}: {e}")

    if isinstance(e, (socket.timeout, TimeoutError)):
        if ctx is not None and ctx.expired():
            return DeadlineExceeded(f"{operation}: deadline exceeded")
        return RemoteUnavailable(f"{operation}: timed out")

    return RemoteUnavailable(f"{operation}: {e}")
