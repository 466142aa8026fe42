from schoolneeds.client.api import SchoolNeedsClient, BackendError, NETWORK_ERROR
from schoolneeds.client.session import AuthContext
from schoolneeds.client.collection import LiveCollection

__all__ = [
    "SchoolNeedsClient",
    "BackendError",
    "NETWORK_ERROR",
    "AuthContext",
    "LiveCollection",
]
