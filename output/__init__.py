"""Transcript naming, rendering and output."""
