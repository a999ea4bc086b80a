"""Item browser application package."""
