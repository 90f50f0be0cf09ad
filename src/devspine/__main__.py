"""Allow ``python -m devspine``."""

from devspine.cli.app import app

app()
