"""Core models, configuration and errors for grey-so."""
