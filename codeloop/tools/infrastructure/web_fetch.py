"""web_fetch tool — retrieves the body of a public http(s) URL with httpx."""

import asyncio
import ipaddress
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ConfigDict, Field

from codeloop.core.cancellation import run_cancellable
from codeloop.tools.domain.errors import ToolExecutionError
from codeloop.tools.domain.registry import ToolOutput, ToolSchema
from codeloop.tools.domain.result import StructuredDisplay

_NAME = "web_fetch"
_ALLOWED_SCHEMES = frozenset({"http", "https"})
_LOCAL_HOSTNAMES = frozenset({"localhost", "localhost.localdomain", "ip6-localhost"})
_MAX_REDIRECTS = 5


class WebFetchInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(min_length=1, description="http or https URL to fetch.")


class WebFetchTool:
    """Fetches a URL; private and loopback hosts are refused unless allowed."""

    input_model = WebFetchInput

    def __init__(
        self,
        timeout_seconds: float,
        max_chars: int,
        allow_private_hosts: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._max_chars = max_chars
        self._allow_private_hosts = allow_private_hosts
        self._transport = transport
        self.schema = ToolSchema.from_input_model(
            name=_NAME,
            description="Fetch the content of a public web page or API over http(s).",
            input_model=WebFetchInput,
            read_only=True,
        )

    def describe(self, arguments: WebFetchInput) -> str:
        return f"Fetch {arguments.url}"

    async def execute(
        self, arguments: WebFetchInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        url = arguments.url
        self._check_url(url)

        # Redirects are followed by hand so every hop passes the host check.
        async with httpx.AsyncClient(
            timeout=self._timeout_seconds,
            follow_redirects=False,
            transport=self._transport,
        ) as client:
            for _ in range(_MAX_REDIRECTS + 1):
                response = await self._get(client, url, cancel)
                if not response.has_redirect_location:
                    break
                url = str(response.url.join(response.headers["location"]))
                self._check_url(url)
            else:
                raise ToolExecutionError(
                    name=_NAME,
                    reason=f"request to {arguments.url} exceeded {_MAX_REDIRECTS} redirects",
                )

        body = response.text
        truncated = len(body) > self._max_chars
        if truncated:
            body = body[: self._max_chars]

        content = body + ("\n[content truncated]" if truncated else "")
        return ToolOutput(
            llm_content=f"HTTP {response.status_code} from {url}\n\n{content}",
            display=StructuredDisplay(
                data={
                    "url": url,
                    "status_code": response.status_code,
                    "content_type": response.headers.get("content-type", ""),
                    "truncated": truncated,
                }
            ),
            is_error=response.is_error,
        )

    async def _get(
        self, client: httpx.AsyncClient, url: str, cancel: asyncio.Event | None
    ) -> httpx.Response:
        try:
            return await run_cancellable(client.get(url), cancel)
        except httpx.TimeoutException as exc:
            raise ToolExecutionError(
                name=_NAME,
                reason=f"request to {url} timed out after {self._timeout_seconds:g} seconds",
            ) from exc
        except httpx.HTTPError as exc:
            raise ToolExecutionError(
                name=_NAME, reason=f"request to {url} failed: {exc}"
            ) from exc

    def _check_url(self, url: str) -> None:
        parts = urlsplit(url)
        if parts.scheme not in _ALLOWED_SCHEMES:
            raise ToolExecutionError(
                name=_NAME, reason=f"unsupported URL scheme '{parts.scheme}'"
            )
        if not parts.hostname:
            raise ToolExecutionError(name=_NAME, reason=f"URL has no host: {url}")
        if not self._allow_private_hosts and is_private_host(parts.hostname):
            raise ToolExecutionError(
                name=_NAME, reason=f"refusing to fetch private host '{parts.hostname}'"
            )


def is_private_host(hostname: str) -> bool:
    """Return True for localhost names and private, loopback or link-local IPs."""
    if hostname.lower() in _LOCAL_HOSTNAMES:
        return True
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_reserved
        or address.is_unspecified
    )
