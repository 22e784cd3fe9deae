"""Entry point for ``python -m taskorbit``."""

from taskorbit.server import run

run()
