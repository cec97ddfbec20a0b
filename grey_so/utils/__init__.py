"""Shared utilities for grey-so."""
