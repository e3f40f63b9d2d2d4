"""Catch-all route that runs every other request through the ProxyController."""

from __future__ import annotations

import base64

from fastapi import APIRouter, Request, Response

from asyncproxy.models.envelope import ProxyRequest, ProxyResponse

router = APIRouter(tags=["proxy"])

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


async def to_proxy_request(request: Request) -> ProxyRequest:
    raw = await request.body()
    try:
        body, encoded = raw.decode("utf-8"), False
    except UnicodeDecodeError:
        body, encoded = base64.b64encode(raw).decode("ascii"), True
    return ProxyRequest(
        http_method=request.method,
        path=request.url.path,
        headers=dict(request.headers),
        query_string_parameters=dict(request.query_params),
        body=body or None,
        is_base64_encoded=encoded,
    )


def to_http_response(response: ProxyResponse) -> Response:
    content = response.body.encode("utf-8")
    if response.is_base64_encoded:
        content = base64.b64decode(response.body)
    out = Response(content=content, status_code=response.status_code, headers=response.headers or {})
    for name, values in (response.multi_value_headers or {}).items():
        for value in values:
            out.headers.append(name, value)
    return out


@router.api_route("/{path:path}", methods=METHODS)
async def proxy(path: str, request: Request) -> Response:
    controller = request.app.state.proxy_controller
    result = await controller.handle(await to_proxy_request(request))
    return to_http_response(result)
