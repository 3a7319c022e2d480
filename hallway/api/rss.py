import logging
import re

import requests
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from hallway.config import Settings, get_settings
from hallway.services.feeds import extract_feed_items

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["rss"])

USER_AGENT = "hallway-rss-proxy"
DEFAULT_FEED_TYPE = "application/rss+xml; charset=utf-8"
_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


@router.get("/rss")
def rss_proxy(
    url: str = "",
    format: str | None = None,
    limit: int | None = None,
    settings: Settings = Depends(get_settings),
):
    url = url.strip()
    if not _HTTP_URL.match(url):
        raise HTTPException(status_code=400, detail="Invalid url")
    try:
        upstream = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=settings.rss_timeout_sec)
    except requests.RequestException as exc:
        logger.warning("rss proxy could not reach %s: %s", url, exc)
        raise HTTPException(status_code=502, detail=f"Proxy failed: {exc}") from exc
    if not upstream.ok:
        logger.warning("rss proxy got %s from %s", upstream.status_code, url)
        raise HTTPException(status_code=upstream.status_code, detail="Upstream error")

    if (format or "").strip().lower() == "json":
        safe_limit = max(1, min(limit, 50)) if limit is not None else None
        return {"items": extract_feed_items(upstream.content, safe_limit)}

    return Response(
        content=upstream.content,
        media_type=upstream.headers.get("content-type") or DEFAULT_FEED_TYPE,
    )
