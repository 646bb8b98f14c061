"""Domain layer for kostnad application."""
