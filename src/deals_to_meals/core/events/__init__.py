"""Application lifecycle events."""

from deals_to_meals.core.events.lifespan import lifespan


__all__ = ["lifespan"]
