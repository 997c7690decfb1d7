"""Core operations behind the API routes."""
