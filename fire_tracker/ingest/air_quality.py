from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests

from fire_tracker import config

from .cache import load_cache, save_cache

logger = logging.getLogger(__name__)

AQI_CATEGORIES = [
    (50, 1, "Good"),
    (100, 2, "Moderate"),
    (150, 3, "Unhealthy for Sensitive Groups"),
    (200, 4, "Unhealthy"),
    (300, 5, "Very Unhealthy"),
]


def _cache_key(lat: float, lon: float) -> str:
    return f"aqi_{lat:.3f}_{lon:.3f}"


def fetch_air_quality(lat: float, lon: float, use_cache: bool = True) -> Optional[List[Dict]]:
    """
    Current air quality observations near a point, in AirNow's format.
    AirNow is tried first; AQICN fills in when AirNow has no station nearby.
    Returns None when neither provider has data.
    """
    cache_key = _cache_key(lat, lon)
    if use_cache:
        cached = load_cache(cache_key, config.FEED_CACHE_TTL_SECONDS)
        if cached is not None:
            return cached

    observations = fetch_airnow_observations(lat, lon)
    if not observations:
        logger.info("No AirNow data for %.3f,%.3f; trying AQICN", lat, lon)
        try:
            observations = fetch_aqicn_observations(lat, lon)
        except (requests.RequestException, ValueError) as exc:
            # AirNow already answered; a failed fallback just means no data.
            logger.error("AQICN fallback failed: %s", exc)
            observations = None

    if not observations:
        return None

    save_cache(cache_key, observations)
    return observations


def fetch_airnow_observations(lat: float, lon: float) -> List[Dict]:
    if not config.AIR_QUALITY_API_KEY:
        logger.warning("AIR_QUALITY_API_KEY is not configured; skipping AirNow")
        return []

    params = {
        "format": "application/json",
        "latitude": lat,
        "longitude": lon,
        "distance": config.AIRNOW_SEARCH_MILES,
        "API_KEY": config.AIR_QUALITY_API_KEY,
    }
    resp = requests.get(config.AIRNOW_URL, params=params, timeout=config.HTTP_TIMEOUT_SECONDS)
    resp.raise_for_status()
    data = resp.json()
    return data if isinstance(data, list) else []


def fetch_aqicn_observations(lat: float, lon: float) -> Optional[List[Dict]]:
    if not config.AQICN_API_KEY:
        logger.warning("AQICN_API_KEY is not configured; skipping AQICN")
        return None

    url = config.AQICN_URL.format(lat=lat, lon=lon)
    resp = requests.get(url, params={"token": config.AQICN_API_KEY}, timeout=config.HTTP_TIMEOUT_SECONDS)
    resp.raise_for_status()
    payload = resp.json()

    data = payload.get("data")
    if payload.get("status") == "error" or not isinstance(data, dict):
        logger.info("Invalid or missing AQICN data: %s", payload)
        return None

    aqi = data.get("aqi")
    if isinstance(aqi, bool) or not isinstance(aqi, (int, float)) or aqi != aqi:
        logger.info("AQICN returned non-numeric AQI: %r", aqi)
        return None

    time_info = data.get("time") or {}
    iso = time_info.get("iso") or ""
    date_part, _, time_part = iso.partition("T")
    hour = int(time_part[:2]) if time_part[:2].isdigit() else None
    city = data.get("city") or {}
    number, name = aqi_category(aqi)

    return [
        {
            "DateObserved": date_part,
            "HourObserved": hour,
            "LocalTimeZone": time_info.get("tz"),
            "ReportingArea": city.get("name") or "Unknown",
            "StateCode": "INT",
            "Latitude": lat,
            "Longitude": lon,
            "ParameterName": (data.get("dominentpol") or "pm25").upper().replace("PM25", "PM2.5"),
            "AQI": aqi,
            "Category": {"Number": number, "Name": name},
        }
    ]


def aqi_category(aqi: float):
    """Map an AQI value to AirNow's (number, name) category."""
    for upper, number, name in AQI_CATEGORIES:
        if aqi <= upper:
            return number, name
    return 6, "Hazardous"
