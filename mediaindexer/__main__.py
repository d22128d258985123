"""Entry point for `python -m mediaindexer`."""

import sys


def main():
    from mediaindexer.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
