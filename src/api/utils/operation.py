"""
Operation boundary

Turns unexpected faults inside a route into a 500 envelope carrying the
operation's fixed message. Expected failures (ClientError, ServerError)
pass through untouched.
"""

import logging
from contextlib import asynccontextmanager

from libs.result import Error
from src.api.error import ClientError, ServerError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def operation_boundary(message: str):
    try:
        yield
    except (ClientError, ServerError):
        raise
    except Exception as e:
        logger.exception(f"{message}: {type(e).__name__}")
        raise ServerError(Error("INTERNAL_ERROR", message), diagnostic=type(e).__name__) from e
