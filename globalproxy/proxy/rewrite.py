"""
Rewrites that keep navigation flowing through the proxy.

Both rewrites are textual: Location values are re-encoded into a proxy
path, and root-relative ``href``/``src``/``action`` attributes in HTML are
pointed back at the proxy. Absolute URLs, ``srcset`` lists, CSS ``url()``
references and URLs inside scripts are left alone.
"""

import re
from urllib.parse import quote

import httpx

from globalproxy.proxy.models import InboundOrigin
from globalproxy.proxy.target import target_origin

# Characters encodeURIComponent leaves alone besides ASCII letters, digits and "-_.~"
URI_COMPONENT_SAFE = "!*'()"

# Opening quote of a root-relative attribute value; protocol-relative "//" is skipped
ROOT_RELATIVE_ATTR_PATTERN = re.compile(r"((?:href|src|action)=[\"'])/(?!/)")


def encode_proxy_path(url: str) -> str:
    """``/`` followed by the whole URL as a single percent-encoded segment."""
    return "/" + quote(url, safe=URI_COMPONENT_SAFE)


def rewrite_location_header(location: str, target_url: str) -> str:
    """
    Rewrite a redirect Location into a proxy path.

    Relative locations are resolved against the URL that produced the
    redirect before being encoded. An empty path serializes as ``/``, so
    ``https://example.com`` is encoded as ``https://example.com/``.
    """
    absolute = httpx.URL(target_url).join(location)
    if absolute.path == "/":
        absolute = absolute.copy_with(path="/")
    return encode_proxy_path(str(absolute))


def rewrite_relative_links(html: str, inbound: InboundOrigin, target_url: str) -> str:
    """
    Point root-relative attributes at ``{inbound}/{target origin}/``.

    Only the target origin is used, so ``href="/a"`` on
    ``https://example.com/docs/page`` becomes
    ``href="https://proxy/https://example.com/a"``.
    """
    replacement = f"{inbound.base}/{target_origin(target_url)}/"
    return ROOT_RELATIVE_ATTR_PATTERN.sub(
        lambda match: match.group(1) + replacement, html
    )
