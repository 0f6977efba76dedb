"""Infrastructure layer — settings source parsing and persistence."""
