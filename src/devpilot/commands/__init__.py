"""Click command groups registered on the ``devpilot`` CLI."""
