"""Allows `python -m writepath`."""

from writepath.main import cli

cli()
