from __future__ import annotations

from typing import Any, Dict

from fastapi import Request, status
from fastapi.responses import RedirectResponse


# PUBLIC_INTERFACE
async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a flat dict.

    JSON bodies are returned as-is (non-object JSON yields an empty dict);
    anything else is parsed as a form (urlencoded or multipart). For
    repeated form keys the last value wins.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        return body if isinstance(body, dict) else {}
    form = await request.form()
    return {key: value for key, value in form.items()}


# PUBLIC_INTERFACE
def redirect_back(request: Request, fallback: str = "/") -> RedirectResponse:
    """
    302 to the page that issued the request (Referer header), or to fallback
    when the header is missing.
    """
    target = request.headers.get("referer") or fallback
    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
