"""Entry point for ``python -m subcrack`` and the ``subcrack`` script."""
from typing import Optional, Sequence

from subcrack.cli import cli


def main(argv: Optional[Sequence[str]] = None):
    cli(args=argv, prog_name="subcrack")


if __name__ == "__main__":
    main()
