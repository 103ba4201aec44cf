"""Allow running circletrace as a module: python -m circletrace."""

from circletrace.cli.app import main

if __name__ == "__main__":
    raise SystemExit(main())
