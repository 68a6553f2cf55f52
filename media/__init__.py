"""Audio format handling."""
