"""Console entry point for pindar."""

from __future__ import annotations

import sys


def main() -> None:
    """Run the pindar CLI."""

    from .cli import create_cli_app

    app = create_cli_app()
    try:
        app(prog_name="pindar")
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
