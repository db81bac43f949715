"""Allow ``python -m envbind``."""

from envbind.cli import main

if __name__ == "__main__":
    main()
