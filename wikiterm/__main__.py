"""Module entrypoint for ``python -m wikiterm``."""

from .cli import main


if __name__ == "__main__":
    main()
