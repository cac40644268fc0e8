"""API routers for FossilVault."""

from fossilvault.routers import import_router

__all__ = ["import_router"]
