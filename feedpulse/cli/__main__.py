"""Allow ``python -m feedpulse.cli`` execution."""

from feedpulse.cli.ingest import main

main()
