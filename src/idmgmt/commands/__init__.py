"""Built-in CLI sub-commands for idmgmt.

* :mod:`~idmgmt.commands.device` -- verify and activate device codes.
* :mod:`~idmgmt.commands.config` -- view and modify user settings.

Each module exports a :class:`typer.Typer` sub-application registered on
the root app in :mod:`idmgmt.app`.
"""
