"""Allow running slippy-find with ``python -m slippy_find``."""

from .cli import main

main()
