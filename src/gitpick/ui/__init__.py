"""Console and terminal UI for gitpick."""
