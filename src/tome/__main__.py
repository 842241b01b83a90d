"""Fallback entrypoint for `python -m tome`.

Routes to the tome Typer application.
"""

from tome.cli.main import main

if __name__ == "__main__":
    main()
