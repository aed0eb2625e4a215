"""Allow ``python -m release_fetcher``."""

from .cli import main

if __name__ == "__main__":
    main()
