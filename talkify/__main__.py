"""Module entrypoint for running the Talkify CLI as ``python -m talkify``."""

from __future__ import annotations

from talkify.cli import main


if __name__ == "__main__":
    main()
