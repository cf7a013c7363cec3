"""Module entrypoint for ``python -m studylenses``.

All argument parsing and session setup happen in ``studylenses.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
