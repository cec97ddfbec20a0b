"""Services behind the grey-so tools."""
