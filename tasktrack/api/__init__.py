"""HTTP API for tasktrack."""
