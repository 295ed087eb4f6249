from .client import RESOURCES, TrelloClient
from .config_types import ClientConfig
from .errors import ApiError, AuthError, InvalidArgument, NetworkError, TrelloClientError

__all__ = [
    "RESOURCES",
    "TrelloClient",
    "ClientConfig",
    "ApiError",
    "AuthError",
    "InvalidArgument",
    "NetworkError",
    "TrelloClientError",
]
