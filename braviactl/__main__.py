"""Module entrypoint for ``python -m braviactl``.

This keeps module-mode execution behavior identical to the console script.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
