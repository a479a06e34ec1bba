from __future__ import annotations

import logging
from typing import Iterator

import requests

from symboltree.domain.errors import DataSourceError
from symboltree.infra.network.common import CHUNK_SIZE, DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)


def iter_remote_chunks(url: str, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """
    Acquire a remote data file using buffered streaming.

    The request is only issued once the iterator is first advanced, so the
    caller controls when the fetch starts. Failures are wrapped in
    DataSourceError and never retried.
    """
    headers = {"User-Agent": USER_AGENT}
    logger.info(f"Network: Streaming data file from {url}")

    try:
        with requests.get(url, headers=headers, stream=True, timeout=DEFAULT_TIMEOUT) as response:
            response.raise_for_status()
            received = 0
            for chunk in response.iter_content(chunk_size=chunk_size):
                if chunk:
                    received += len(chunk)
                    yield chunk
            logger.debug(f"Network: Stream finished ({received / 1024:.1f} KB).")
    except requests.exceptions.Timeout as e:
        raise DataSourceError(f"Data fetch timed out after {DEFAULT_TIMEOUT}s: {url}") from e
    except requests.exceptions.RequestException as e:
        raise DataSourceError(f"Data fetch failed for {url}: {e}") from e
