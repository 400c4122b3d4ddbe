from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

import requests

from fire_tracker import config
from fire_tracker.model.hazards import EvacuationZone

from .cache import load_cache, save_cache

logger = logging.getLogger(__name__)


def fetch_evacuation_zones(url: Optional[str] = None, use_cache: bool = True) -> List[EvacuationZone]:
    """Fetch evacuation zones, keeping fire-related evacuation orders only."""
    url = url if url is not None else config.EVACUATION_API_URL
    if not url:
        logger.warning("EVACUATION_API_URL is not configured; no evacuation data")
        return []

    cache_key = f"evacuations_{url}"
    if use_cache:
        cached = load_cache(cache_key, config.FEED_CACHE_TTL_SECONDS)
        if cached is not None:
            return cached

    start = time.perf_counter()
    resp = requests.get(url, timeout=config.HTTP_TIMEOUT_SECONDS)
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError(f"Evacuation feed returned {type(data).__name__}, expected a FeatureCollection")

    features = data.get("features")
    if not isinstance(features, list):
        raise ValueError("Evacuation feed 'features' is not a list")

    zones = parse_zone_features(features)

    duration_ms = (time.perf_counter() - start) * 1000.0
    logger.info("Evacuation feed completed in %.0fms | Active zones: %d", duration_ms, len(zones))

    save_cache(cache_key, zones)
    return zones


def parse_zone_features(features: List[Dict]) -> List[EvacuationZone]:
    zones: List[EvacuationZone] = []
    for feature in features:
        if not isinstance(feature, dict):
            logger.warning("Skipping non-object zone feature: %r", feature)
            continue
        try:
            zone = EvacuationZone.from_feature(feature)
        except (TypeError, ValueError, IndexError) as exc:
            props = feature.get("properties") or {}
            logger.warning("Skipping malformed zone %r: %s", props.get("zone_id"), exc)
            continue
        if is_evacuation_order(zone):
            zones.append(zone)
    return zones


def is_evacuation_order(zone: EvacuationZone) -> bool:
    if zone.status != config.EVACUATION_ORDER_STATUS:
        return False
    # A missing reason is not a flooding advisory.
    reason = (zone.status_reason or "").lower()
    return config.FLOODING_REASON_KEYWORD not in reason
