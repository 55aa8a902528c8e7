"""Module entrypoint for ``python -m sparseclone``."""

from .cli import main


if __name__ == "__main__":
    main()
