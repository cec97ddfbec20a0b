"""grey-so CLI commands."""
