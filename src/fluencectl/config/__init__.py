"""CLI settings, project discovery and logging setup."""
