"""Command registrations for the Typer CLI.

``assetlens/cli.py`` stays the entrypoint module (``pyproject.toml`` points
the console script at ``assetlens.cli:app``); commands live in this package and
are registered from there.
"""
