"""Application constants."""

USER_AGENT = "street-geocoder/0.3 (+address batch geocoding)"
STAGES = ("geocode",)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20

STREET_NAME_FIELD = "streetName"
STREET_NUMBER_FIELD = "streetNumber"
LAT_FIELD = "lat"
LON_FIELD = "lon"

JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "event",
    "status",
    "record_index",
    "reason",
    "attempt",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
