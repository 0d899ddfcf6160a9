"""Run the CLI straight from a checkout: `python -m main learning show <id>`.

`src/` is not importable until the package is installed, so it is put on
`sys.path` first.
"""

from __future__ import annotations

import sys
from pathlib import Path

if sys.platform == "win32":
    # cp1252 consoles cannot print the rich tables.
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
