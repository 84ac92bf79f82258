"""API and service schemas."""
