"""Interfaces for grey-so backends."""
