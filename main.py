"""Run `mkt` from a checkout: `python main.py calendly users me --dry-run`.

Puts `src/` on the path so the tool adapters import without an install.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
