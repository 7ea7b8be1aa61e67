from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from globalproxy.disclaimer import get_root_html
from globalproxy.proxy.headers import finish_headers
from globalproxy.proxy.route import ANY_METHOD, router as proxy_router
from globalproxy.proxy.target import get_inbound_origin

router = APIRouter()


async def disclaimer(request: Request):
    """The bare root never proxies; it explains how to use the service."""
    response = HTMLResponse(get_root_html(get_inbound_origin(request).base))
    finish_headers(response.headers)
    return response


router.add_route("/", disclaimer, methods=ANY_METHOD, include_in_schema=False)

# The catch-all proxy route must stay last
router.include_router(proxy_router)
