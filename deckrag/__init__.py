"""deckrag: document ingestion and retrieval for AI slide generation."""
