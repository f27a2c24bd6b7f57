"""
Nox sessions for resource-usage.

Sessions:
  - lint  : ruff + black + mypy over the package
  - tests : pytest (unit, property and CLI tests)

Pass extra args to pytest like:
  nox -s tests -- -k "report and not cli" -vv
"""

from __future__ import annotations

import nox

# Reuse envs to speed up local iteration
nox.options.reuse_venv = True
nox.options.stop_on_first_error = False

PY_PATHS = ["resource_usage", "noxfile.py"]

TEST_PYTHONS = ["3.10", "3.11", "3.12"]


@nox.session(name="lint", python="3.11")
def lint(session: nox.Session) -> None:
    """Static analysis: ruff, black (check), mypy."""
    session.install("ruff>=0.6.0", "black>=24.3.0", "mypy>=1.10.0")
    session.install("-e", ".")
    session.run("ruff", "check", *PY_PATHS)
    session.run("black", "--check", *PY_PATHS)
    session.run(
        "mypy",
        "--pretty",
        "--show-error-codes",
        "--ignore-missing-imports",
        "resource_usage",
    )


@nox.session(name="tests", python=TEST_PYTHONS)
def tests(session: nox.Session) -> None:
    """Full test suite."""
    session.env.setdefault("PYTHONUNBUFFERED", "1")
    session.install("-e", ".[test]")
    session.run("pytest", "-q", *session.posargs)
