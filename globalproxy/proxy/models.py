from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, List, Optional, Tuple

HeaderList = List[Tuple[str, str]]

REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})


class InvalidTargetURL(ValueError):
    """The inbound path does not decode to an absolute http(s) URL."""


class ResponseBranch(str, Enum):
    """How an upstream response is turned into the outbound response."""

    REDIRECT = "redirect"
    HTML = "html"
    PASSTHROUGH = "passthrough"


@dataclass
class ProxiedRequest:
    """The inbound request re-pointed at the target URL."""

    method: str
    url: str
    headers: HeaderList = field(default_factory=list)
    body: Optional[AsyncIterator[bytes]] = None


@dataclass(frozen=True)
class InboundOrigin:
    """Scheme and host the caller used to reach the proxy."""

    scheme: str
    host: str

    @property
    def base(self) -> str:
        return f"{self.scheme}://{self.host}"
