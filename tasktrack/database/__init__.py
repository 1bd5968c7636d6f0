"""Persistence for tasktrack."""
