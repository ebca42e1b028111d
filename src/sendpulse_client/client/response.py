"""Response normalization -- maps raw HTTP exchanges to :class:`SendPulseResponse`.

Every public operation returns a
:class:`~sendpulse_client.models.SendPulseResponse`. This module builds it
from two kinds of input:

* :func:`normalize` -- a status code and raw body received from the API.
* :func:`error_result` -- a client-side failure that happened before any
  response arrived (local validation, connection failure).

Body parsing is defensive: anything that is not a JSON object or array is
logged through :mod:`sendpulse_client.output` and dropped, never raised.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from sendpulse_client.models import SendPulseResponse
from sendpulse_client.output import get_output


def normalize(status_code: int, raw_body: Optional[str]) -> SendPulseResponse:
    """Build the unified result for a received response.

    ``is_error`` depends on the status alone: a 200 whose body cannot be
    parsed is still a success, with ``data=None``.

    Args:
        status_code: HTTP status of the response.
        raw_body: Undecoded body text; may be empty.
    """
    return SendPulseResponse(
        http_status_code=status_code,
        is_error=status_code != 200,
        data=extract_response_data(raw_body),
    )


def extract_response_data(raw_body: Optional[str]) -> Any:
    """Parse *raw_body* as JSON, keeping only objects and arrays.

    Returns:
        A ``dict`` or ``list``, or ``None`` for an empty body, invalid JSON,
        or a JSON scalar.
    """
    text = (raw_body or "").strip()
    if not text:
        return None

    try:
        parsed = json.loads(text)
    except ValueError as exc:
        get_output().log_exception("Response body is not valid JSON", exc)
        return None

    if isinstance(parsed, (dict, list)):
        return parsed

    get_output().warning(
        f"Invalid response: expected a JSON object or array, got {type(parsed).__name__}"
    )
    return None


def error_result(message: str) -> SendPulseResponse:
    """Build the result for a failure where no response was received.

    Example::

        >>> error_result("Empty book id").http_status_code
        0
    """
    return SendPulseResponse(
        http_status_code=0,
        is_error=True,
        data=None,
        sdk_error_message=message,
    )
