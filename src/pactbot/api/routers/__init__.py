"""API routers for PactBot."""

from pactbot.api.routers import contracts, health, metrics

__all__ = ["contracts", "health", "metrics"]
