# 🧭 page_gateway/infrastructure/retrieval/__init__.py
from .orchestrator import RetrievalOrchestrator

__all__ = ["RetrievalOrchestrator"]
