"""
Temporal client bootstrap shared by the worker and the starter.
"""

from __future__ import annotations

import structlog
from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter

from .config import Settings

log = structlog.get_logger(__name__)


async def connect_client(settings: Settings) -> Client:
    """
    Connect to the Temporal service described by ``settings``.

    The pydantic data converter lets request and result models cross the
    workflow boundary as plain JSON.
    """
    log.info(
        "Connecting to Temporal",
        address=settings.TEMPORAL_ADDRESS,
        namespace=settings.TEMPORAL_NAMESPACE,
        tls=settings.TEMPORAL_TLS,
    )
    return await Client.connect(
        settings.TEMPORAL_ADDRESS,
        namespace=settings.TEMPORAL_NAMESPACE,
        tls=settings.TEMPORAL_TLS,
        api_key=settings.TEMPORAL_API_KEY,
        data_converter=pydantic_data_converter,
    )
