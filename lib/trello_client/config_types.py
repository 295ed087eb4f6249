from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgument

DEFAULT_URL = "https://api.trello.com"
DEFAULT_IDENTIFIER = "trello-client (Python)"
CAMELCASE = "camelcase"


@dataclass(frozen=True)
class ClientConfig:
    key: str
    token: str | None = None
    base_url: str = DEFAULT_URL
    identifier: str = DEFAULT_IDENTIFIER
    version: int | str = 1
    casing: str | None = CAMELCASE
    debug: bool = False
    fatal: bool = False
    retries: int = 0
    timeout_s: float = 10.0

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise InvalidArgument("key is required")
        if self.retries < 0:
            raise InvalidArgument(f"retries must be >= 0, got {self.retries}")
        if self.timeout_s <= 0:
            raise InvalidArgument(f"timeout_s must be > 0, got {self.timeout_s}")

    @property
    def camelcase(self) -> bool:
        return self.casing == CAMELCASE
