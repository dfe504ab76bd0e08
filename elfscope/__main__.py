"""Allow ``python -m elfscope``."""

from elfscope.cli import main

main()
