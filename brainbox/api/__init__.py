"""Remote collaborator access"""

from brainbox.api.client import CatalogClient, TokenProvider
from brainbox.api.decoding import (
    decode_collection,
    decode_item,
    decode_search_results,
)
from brainbox.api.errors import (
    AuthorizationMissingError,
    CatalogAPIError,
    RemoteError,
    TransportError,
    describe_error,
)

__all__ = [
    "CatalogClient",
    "TokenProvider",
    "decode_collection",
    "decode_item",
    "decode_search_results",
    "AuthorizationMissingError",
    "CatalogAPIError",
    "RemoteError",
    "TransportError",
    "describe_error",
]
