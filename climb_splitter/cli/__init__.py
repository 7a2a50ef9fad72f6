"""
cli — command-line interface for climb-splitter.

Entry points
────────────
  python -m climb_splitter   (via climb_splitter/__main__.py)
  climb-splitter             (via pyproject.toml [project.scripts])

Subcommands: run | probe | profiles
"""

from climb_splitter.cli.main import build_parser, cmd_probe, cmd_profiles, cmd_run, main

__all__ = ["build_parser", "cmd_probe", "cmd_profiles", "cmd_run", "main"]
