import asyncio
import logging
from tortoise import Tortoise
from portfolio.config import TORTOISE_ORM

_logger = logging.getLogger("db")


async def init_db(config: dict = None, max_retries: int = 3, delay_seconds: float = 0.5) -> None:
    """Initialize Tortoise and create missing tables, retrying transient failures.

    Unlike a best-effort startup, the last failure is re-raised: the API cannot
    serve registration or the photo catalog without its database.
    """
    config = config or TORTOISE_ORM
    for attempt in range(1, max_retries + 1):
        try:
            await Tortoise.init(config=config)
            await Tortoise.generate_schemas(safe=True)
            _logger.info("Database initialized successfully")
            return
        except Exception as exc:
            if attempt == max_retries:
                _logger.error("Database unavailable after %s attempts: %s", attempt, exc)
                raise
            _logger.info(
                "DB init failed (attempt %s/%s): %s; retrying in %.1fs",
                attempt,
                max_retries,
                exc,
                delay_seconds,
            )
            await asyncio.sleep(delay_seconds)


async def close_db() -> None:
    """Close database connections in the current event loop."""
    await Tortoise.close_connections()
