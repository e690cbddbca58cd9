import os

from doit.action import CmdAction


def task_format():
    """Format code using ruff."""

    def router(help=False):
        if help:
            return """echo '
tschart format
==============

Sorts imports and formats src/, tests/, scripts/ and dodo.py with ruff:
  ruff check --select I --fix .
  ruff format .

Usage:
  doit format
  doit format --help
  '"""
        return "ruff check --select I --fix . && ruff format ."

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "help",
                "long": "help",
                "default": False,
                "type": bool,
            },
        ],
        "verbosity": 2,
    }


def task_test():
    """Run the test suite with pytest."""

    def router(help=False, keyword=""):
        if help:
            return """echo '
tschart tests
=============

Runs pytest on tests/ with the non-interactive Agg backend.

Usage:
  doit test
  doit test -k bucketing     # only tests matching a keyword
  '"""
        env_prefix = "MPLBACKEND=Agg " if "MPLBACKEND" not in os.environ else ""
        if keyword:
            return f"{env_prefix}pytest -k '{keyword}'"
        return f"{env_prefix}pytest"

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "help",
                "long": "help",
                "default": False,
                "type": bool,
            },
            {
                "name": "keyword",
                "short": "k",
                "default": "",
                "type": str,
            },
        ],
        "verbosity": 2,
    }
