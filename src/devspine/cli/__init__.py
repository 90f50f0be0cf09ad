"""
CLI layer for devspine.

A Typer application whose commands delegate to the reconciliation engine
(``devspine.reconcile``).  This package handles only terminal transport:
argument parsing, coloured output, exit codes.

Entry point::

    devspine --help
"""

from devspine.cli.app import app

__all__ = ["app"]
