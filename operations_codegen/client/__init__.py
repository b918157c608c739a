"""
Runtime client for the operations of a deployed API.
"""

from .operations_client import OperationsClient, decode_response, drop_unset, split_messages
from .result import ClientResponse, ResponseError
from .subscription import Subscription, SubscriptionState

__all__ = [
    "ClientResponse",
    "OperationsClient",
    "ResponseError",
    "Subscription",
    "SubscriptionState",
    "decode_response",
    "drop_unset",
    "split_messages",
]
