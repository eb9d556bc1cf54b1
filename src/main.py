"""Development entry point.

- Runs the umbrella CLI with `python -m main` from `src/`.
- Installed environments use the `mkt` console script instead.
"""

from __future__ import annotations

import sys

# Windows terminals default to cp1252; JSON output keeps non-ASCII characters.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
