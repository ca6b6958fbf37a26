"""Dashboard export."""
