"""Tool settings and logging configuration for the propbind CLI."""
