"""Best-effort mirroring of profile changes onto the identity provider."""

from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

SyncFailureHandler = Callable[[str, Exception, dict], None]


def log_sync_failure(operation: str, error: Exception, context: dict) -> None:
    """Default sink for failed identity provider syncs."""
    logger.warning(
        "identity_sync_failed",
        operation=operation,
        error=str(error),
        error_type=type(error).__name__,
        **context,
    )


async def run_best_effort(
    operation: str,
    call: Callable[[], Awaitable[None]],
    on_failure: SyncFailureHandler,
    **context: object,
) -> bool:
    """Await a secondary write; report and swallow its failure.

    Returns True if the call succeeded.
    """
    try:
        await call()
        return True
    except Exception as e:
        on_failure(operation, e, dict(context))
        return False
