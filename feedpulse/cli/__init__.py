"""Command-line tools for feedpulse.

- ``python -m feedpulse.cli.ingest`` - ingest, list, report on, delete and
  clear stored feedback using the configured storage backend.
- ``python -m feedpulse.cli`` - same as above.
"""
