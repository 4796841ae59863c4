"""Module entrypoint for ``python -m kbtree``."""

from .cli import main


if __name__ == "__main__":
    main()
