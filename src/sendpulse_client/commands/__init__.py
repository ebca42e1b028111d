"""Built-in CLI sub-commands for sendpulse_client.

This package groups the hand-written Typer sub-command modules that sit
next to the commands generated from the endpoint table:

* :mod:`~sendpulse_client.commands.init` -- create a profile.
* :mod:`~sendpulse_client.commands.auth` -- obtain, inspect and clear the
  persisted bearer token.
* :mod:`~sendpulse_client.commands.config` -- view and modify global
  settings and stored profiles.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``auth`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``init``).
"""
