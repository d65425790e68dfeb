"""External collaborators (statement extraction)."""
