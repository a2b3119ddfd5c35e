import sys

from clispec.cli import app


def main():
    result = app()
    if isinstance(result, int):
        sys.exit(result)


if __name__ == "__main__":
    main()
