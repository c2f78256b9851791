"""Allow running pipctl with python -m pipctl."""

from pipctl.cli.main import app

app(prog_name="pipctl")
