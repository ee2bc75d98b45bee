"""
Error reporting via Sentry, enabled when a DSN is configured
"""
import logging

import sentry_sdk

from portfolio.config import settings

logger = logging.getLogger(__name__)


def init_observability() -> bool:
    if not settings.SENTRY_DSN:
        return False
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=0.1,
        environment=settings.APP_ENV,
        # request bodies carry passwords
        send_default_pii=False,
    )
    logger.info("Sentry initialized")
    return True
