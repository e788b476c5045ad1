"""Domain error to HTTP response mapping."""
