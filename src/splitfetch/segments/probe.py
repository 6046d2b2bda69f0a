"""Metadata probe for the remote resource."""

import asyncio
import typing as t

import aiohttp
from aiohttp import hdrs

from ..domain.exceptions import MetadataError
from ..domain.filename import resolve_filename
from ..domain.job import ResourceMetadata
from ..infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru

RANGE_UNIT = "bytes"


class RangeProber:
    """Learns size, range support and filename with a single HEAD request.

    The probe is not retried: any transport error, HTTP error status or
    unusable Content-Length header is fatal for the job.
    """

    def __init__(
        self,
        client: aiohttp.ClientSession,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        self.client = client
        self.logger = logger

    async def probe(self, url: str) -> ResourceMetadata:
        """Probe the resource at url.

        Raises:
            MetadataError: If the request fails, the length header is missing
                or invalid, or no filename can be derived.
        """
        self.logger.debug(f"Probing {url}")
        try:
            async with self.client.head(url, allow_redirects=True) as response:
                response.raise_for_status()
                raw_length = response.headers.get(hdrs.CONTENT_LENGTH)
                accept_ranges = response.headers.get(hdrs.ACCEPT_RANGES)
                disposition = response.content_disposition
                final_url = response.url
        except aiohttp.ClientResponseError as exc:
            raise MetadataError(
                f"HTTP {exc.status} from metadata probe", url=url
            ) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise MetadataError(
                f"Metadata probe failed: {type(exc).__name__}: {exc}", url=url
            ) from exc

        total_size = self._parse_total_size(raw_length, url)
        filename = resolve_filename(
            disposition.filename if disposition is not None else None, final_url
        )
        if not filename:
            raise MetadataError("Cannot derive a filename for resource", url=url)

        metadata = ResourceMetadata(
            total_size=total_size,
            supports_ranges=accept_ranges == RANGE_UNIT,
            filename=filename,
        )
        self.logger.debug(
            f"Probed {url}: size={metadata.total_size} "
            f"ranges={metadata.supports_ranges} filename={metadata.filename}"
        )
        return metadata

    @staticmethod
    def _parse_total_size(raw_length: str | None, url: str) -> int:
        if raw_length is None:
            raise MetadataError("Missing Content-Length header", url=url)
        try:
            total_size = int(raw_length.strip())
        except ValueError as exc:
            raise MetadataError(
                f"Unparseable Content-Length {raw_length!r}", url=url
            ) from exc
        if total_size < 0:
            raise MetadataError(f"Negative Content-Length {total_size}", url=url)
        return total_size
