"""Numeric process exit codes for the ``sendpulse`` CLI.

Codes follow `clig.dev <https://clig.dev/>`_ conventions. Each constant is
referenced by the corresponding
:class:`~sendpulse_client.exceptions.SendPulseError` subclass, so shell
scripts can branch on the failure class without parsing stderr.

Example::

    $ sendpulse addressbooks get 0
    Error: Empty book id
    $ echo $?
    2   # EXIT_INVALID_USAGE -- rejected before any request was sent
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments or a local validation failure."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

