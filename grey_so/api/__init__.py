"""Command-line surface for grey-so."""
