from __future__ import annotations

import json
from typing import Any


class TrelloClientError(Exception):
    """Base client error."""


class NetworkError(TrelloClientError):
    """Transport/network layer error."""


class InvalidArgument(TrelloClientError, ValueError):
    """Malformed resource or dispatch call."""


class ApiError(TrelloClientError):
    def __init__(self, status_code: int, message: str, details: str | None = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details
        self.body = body


class AuthError(ApiError):
    """Auth-related API error."""


def parse_api_error_detail(details: str | None) -> dict | None:
    if not details:
        return None
    try:
        data = json.loads(details)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
