"""Package entry point for ``python -m gopher_bot``."""

import sys

if __name__ == "__main__":
    from gopher_bot.cli import main
    sys.exit(main())
