"""HTTP API for LP-Engine."""
