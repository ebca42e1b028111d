"""Request pipeline: encoder, transport, response normalizer and retry coordinator.

Re-exports the public client classes so callers can write::

    from sendpulse_client.client import SyncClient
"""

from sendpulse_client.client.response import error_result, normalize
from sendpulse_client.client.sync_client import SyncClient
from sendpulse_client.client.transport import Transport

__all__ = ["SyncClient", "Transport", "error_result", "normalize"]
