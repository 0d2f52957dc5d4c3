"""Allow ``python -m ontolint``."""

from ontolint.cli import main

main()
