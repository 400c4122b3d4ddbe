from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

import requests

from fire_tracker import config
from fire_tracker.model.hazards import FireIncident

from .cache import load_cache, save_cache

logger = logging.getLogger(__name__)


def _cache_key(url: str) -> str:
    return f"fires_{url}"


def fetch_fires(url: Optional[str] = None, use_cache: bool = True) -> List[FireIncident]:
    """
    Fetch the incident GeoJSON feed and return active fires.
    Requests inactive incidents too and drops them here, the way the feed
    is consumed upstream.
    """
    url = url if url is not None else config.FIRE_API_URL
    if not url:
        logger.warning("FIRE_API_URL is not configured; no fire data")
        return []

    cache_key = _cache_key(url)
    if use_cache:
        cached = load_cache(cache_key, config.FEED_CACHE_TTL_SECONDS)
        if cached is not None:
            return cached

    start = time.perf_counter()
    resp = requests.get(url, params={"inactive": "true"}, timeout=config.HTTP_TIMEOUT_SECONDS)
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError(f"Fire feed returned {type(data).__name__}, expected a FeatureCollection")

    features = data.get("features")
    if not isinstance(features, list):
        raise ValueError("Fire feed 'features' is not a list")

    fires = parse_fire_features(features)

    duration_ms = (time.perf_counter() - start) * 1000.0
    logger.info("Fire feed completed in %.0fms | Active fires: %d", duration_ms, len(fires))

    save_cache(cache_key, fires)
    return fires


def parse_fire_features(features: List[Dict]) -> List[FireIncident]:
    fires: List[FireIncident] = []
    for feature in features:
        if not isinstance(feature, dict):
            logger.warning("Skipping non-object fire feature: %r", feature)
            continue
        props = feature.get("properties") or {}
        if not props.get("IsActive"):
            continue
        try:
            fires.append(FireIncident.from_feature(feature))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping malformed fire %r: %s", props.get("Name"), exc)
    return fires
