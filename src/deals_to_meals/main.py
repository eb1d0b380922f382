"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn deals_to_meals.main:app --reload

    # Or directly
    python -m deals_to_meals.main
"""

from deals_to_meals.factory import create_app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    from deals_to_meals.core.config import get_settings

    settings = get_settings()

    uvicorn.run(
        "deals_to_meals.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )
