"""Allow ``python -m pivot``."""

from pivot.cli.main import main

main()
