"""Provider tool protocols."""
