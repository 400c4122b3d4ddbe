import os

# Upstream GeoJSON feeds. An empty URL disables that feed.
FIRE_API_URL = os.getenv("FIRE_API_URL", "")
EVACUATION_API_URL = os.getenv("EVACUATION_API_URL", "")

# Air quality providers: AirNow first, AQICN as fallback
AIR_QUALITY_API_KEY = os.getenv("AIR_QUALITY_API_KEY", "")
AQICN_API_KEY = os.getenv("AQICN_API_KEY", "")
AIRNOW_URL = "https://www.airnowapi.org/aq/observation/latLong/current/"
AQICN_URL = "https://api.waqi.info/feed/geo:{lat};{lon}/"
AIRNOW_SEARCH_MILES = 25

# Distance below which an evacuation zone counts as nearby.
# Deployments have used both 1 and 5 miles.
NEARBY_THRESHOLD_MILES = float(os.getenv("NEARBY_THRESHOLD_MILES", "1.0"))

FEED_CACHE_TTL_SECONDS = 60 * 60
HTTP_TIMEOUT_SECONDS = 20

EVACUATION_ORDER_STATUS = "Evacuation Order"
FLOODING_REASON_KEYWORD = "flooding"
