"""Boundary adapters: relational metadata store and vector index."""
