"""grey-so command-line interface."""
