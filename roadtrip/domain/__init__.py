"""Domain models, enums and exceptions."""
