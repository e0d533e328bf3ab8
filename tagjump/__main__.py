"""Module entrypoint for ``python -m tagjump``.

All argument parsing and command dispatch happen in ``tagjump.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
