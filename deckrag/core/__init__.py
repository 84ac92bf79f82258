"""Core domain logic: document processing, agent tools, exceptions."""
