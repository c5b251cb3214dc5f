"""CLI entry point: python -m pyracantha"""

from pyracantha.cli import main

if __name__ == "__main__":
    main()
