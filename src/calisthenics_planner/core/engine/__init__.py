"""Runtime configuration loading."""
