from typing import cast

import structlog


class LoggerMixin:
    """Structured logger named ``<module>.<Class>`` for catalog components"""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        cls = type(self)
        return cast(
            "structlog.stdlib.BoundLogger",
            structlog.get_logger(f"{cls.__module__}.{cls.__qualname__}"),
        )
