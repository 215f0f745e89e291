"""Allow ``python -m precision_lens`` to launch the controller."""

from __future__ import annotations

import sys


def main() -> None:
    from precision_lens import run
    try:
        run(sys.argv[1:])
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
