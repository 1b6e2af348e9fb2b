"""Core utilities: errors, security and locking."""
