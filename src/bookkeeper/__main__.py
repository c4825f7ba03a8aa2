"""Allow ``python -m bookkeeper``."""

from .cli import main

if __name__ == "__main__":
    main()
