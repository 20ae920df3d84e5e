"""Router module exports."""
from src.api.routers import records

__all__ = ["records"]
