"""Module entrypoint for running Articlecast as ``python -m articlecast``."""

from __future__ import annotations

from articlecast.cli import main


if __name__ == "__main__":
    main()
