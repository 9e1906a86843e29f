"""
python -m linesdk <cmd>    — API operations (refresh, revoke, verify, profile, ...)
"""

import sys


def main() -> None:
    if len(sys.argv) < 2:
        print(
            "Usage: linesdk [--channel-id ID] <refresh|revoke|verify|profile|friendship|show-token>",
            file=sys.stderr,
        )
        sys.exit(1)

    from .api import main as api_main

    api_main()


if __name__ == "__main__":
    main()
