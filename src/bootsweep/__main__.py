"""Allow ``python -m bootsweep``."""

from bootsweep.cli import main

main()
