import asyncio
import logging
import os
from typing import Callable, Optional

import httpx

from deferred_fetch.core.config import Settings
from deferred_fetch.core.errors import BlockedURLError, InvalidURLError
from deferred_fetch.fetch import scraper
from deferred_fetch.fetch.base import OutputKind
from deferred_fetch.fetch.guard import is_blocked
from deferred_fetch.fetch.transform import get_transformer
from deferred_fetch.fetch.utils import generate_unique_filename, validate_url
from deferred_fetch.schemas import FetchRequest, FetchResult
from deferred_fetch.storage import files

logger = logging.getLogger(__name__)

Guard = Callable[..., bool]
Namer = Callable[[str, str], str]

def _describe(error: BaseException) -> str:
    return str(error) or error.__class__.__name__

class Fetcher:
    """
    Fetch a URL, persist the transformed body under the download directory and
    report only where it was saved.

    Every public operation returns a FetchResult; failures never raise.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        guard: Guard = is_blocked,
        namer: Namer = generate_unique_filename,
    ):
        self.settings = settings
        self._transport = transport
        self._guard = guard
        self._namer = namer

    @property
    def download_dir(self) -> str:
        return self.settings.DOWNLOAD_DIR

    async def fetch(self, request: FetchRequest, kind: OutputKind) -> FetchResult:
        url = request.url

        # Step 1: reject malformed URLs before any I/O
        try:
            validate_url(url)
        except InvalidURLError as e:
            logger.warning("Rejected invalid URL: %r", url)
            return FetchResult.failure(str(e))

        try:
            file_path, content_type = await self._fetch_and_save(request, OutputKind(kind))
        except Exception as e:
            logger.warning("Fetch of %s as %s failed: %s", url, kind, _describe(e))
            return FetchResult.failure(f"Failed to fetch {url}: {_describe(e)}")

        logger.info("Saved %s as %s to %s", url, content_type, file_path)
        return FetchResult.saved(file_path, content_type)

    async def html(self, request: FetchRequest) -> FetchResult:
        return await self.fetch(request, OutputKind.HTML)

    async def json(self, request: FetchRequest) -> FetchResult:
        return await self.fetch(request, OutputKind.JSON)

    async def text(self, request: FetchRequest) -> FetchResult:
        return await self.fetch(request, OutputKind.TEXT)

    async def markdown(self, request: FetchRequest) -> FetchResult:
        return await self.fetch(request, OutputKind.MARKDOWN)

    async def _fetch_and_save(self, request: FetchRequest, kind: OutputKind):
        url = request.url

        # Step 2: make sure there is somewhere to write
        await files.ensure_directory(self.download_dir)

        # Step 3: SSRF check, may hit DNS
        blocked = await asyncio.to_thread(self._guard, url, resolve=self.settings.RESOLVE_HOSTS)
        if blocked:
            raise BlockedURLError(url)

        # Step 4-5: fetch, non-2xx raises
        response = await scraper.fetch_response(
            url,
            request.headers,
            timeout=self.settings.REQUEST_TIMEOUT,
            user_agent=self.settings.USER_AGENT,
            transport=self._transport,
            guard=self._guard,
            resolve_hosts=self.settings.RESOLVE_HOSTS,
        )

        # Step 6: transform
        transformed = get_transformer(kind).transform(response.text)

        # Step 7-8: name and persist
        filename = self._namer(url, transformed.extension)
        file_path = os.path.join(self.download_dir, filename)
        await files.write_text(file_path, transformed.content)

        return file_path, transformed.content_type
