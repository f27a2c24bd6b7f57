"""
resource_usage.cli
------------------
Typer app behind the ``resource-usage`` console script.

Usage:
  python -m resource_usage.cli report calls.cbor
  python -m resource_usage.cli limits --json
"""
from __future__ import annotations

from .main import app, main

__all__ = ["app", "main"]
