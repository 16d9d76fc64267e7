"""Module entrypoint.

Allows:
    python -m callsite_logger
"""

from __future__ import annotations

from callsite_logger.cli import main

if __name__ == "__main__":
    main()
