"""Allow running pidmark as ``python -m pidmark``."""

from pidmark.main import app

app()
