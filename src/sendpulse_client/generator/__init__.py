"""CLI generator -- build a Typer command tree from the endpoint table.

Typical usage::

    from sendpulse_client.endpoints import ENDPOINTS, GROUPS
    from sendpulse_client.generator import build_command_tree

    app = build_command_tree(ENDPOINTS, GROUPS, request_callback=my_fn)

Sub-modules:

* :mod:`~sendpulse_client.generator.param_mapper` -- Map endpoint
  parameters to Typer positional arguments and ``--option`` flags.
* :mod:`~sendpulse_client.generator.command_tree` -- Group endpoints and
  attach leaf commands with dynamically generated function signatures.
"""

from sendpulse_client.generator.command_tree import build_command_tree, command_name

__all__ = ["build_command_tree", "command_name"]
