"""Internal constants shared across the package."""

EARTH_RADIUS_M = 6_371_000.0

#: State reported for a device outside every known zone.
NOT_HOME = "not_home"

ZONE_ENTITY_PREFIX = "zone."
SENSOR_DOMAIN = "sensor"
TRACKER_DOMAIN = "device_tracker"

#: Attribute keys carry this prefix so they double as sensor entity suffixes.
ATTRIBUTE_KEY_PREFIX = "_"

#: Path of the token inside the decoded login response.
LOGIN_TOKEN_PATH: tuple[str, ...] = ("userInfo", "key2018")

FRESHNESS_WINDOW_S = 24 * 3600

# ------------------------------------------------------------------
# Battery voltage scale  (V -> %)
# ------------------------------------------------------------------

BATTERY_EMPTY_V = 11.0
BATTERY_FULL_V = 13.0

GEOCODE_HIT_DISTANCE_M = 100.0
DEFAULT_GEOCODING_URL = "https://us1.locationiq.com/v1/reverse"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
USER_AGENT = "gpsbridge/1"
