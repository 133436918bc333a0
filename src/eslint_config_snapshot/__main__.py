"""Allow ``python -m eslint_config_snapshot``."""

from .cli import app

app(prog_name="eslint-config-snapshot")
