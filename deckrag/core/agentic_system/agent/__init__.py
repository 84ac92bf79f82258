"""Agent tools."""

from deckrag.core.agentic_system.agent.rag_agent_tool import create_document_rag_tool

__all__ = ["create_document_rag_tool"]
