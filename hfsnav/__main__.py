"""Module entrypoint for ``python -m hfsnav``.

All argument parsing and dispatch happen in ``hfsnav.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
