"""LCDinator daemon application."""
