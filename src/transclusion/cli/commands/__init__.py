"""Top-level commands: render, validate."""
