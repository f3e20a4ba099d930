"""Internal constants shared across the library."""

BASE_URL = "https://owner-api.teslamotors.com/api/1"
AUTH_URL = "https://owner-api.teslamotors.com/oauth/token"
STREAMING_URL = "https://streaming.vn.teslamotors.com"
USER_AGENT = "pytesla"

#: Telemetry columns requested from the streaming endpoint, in order.
#: Every record is prefixed with an epoch-milliseconds timestamp column.
STREAM_COLUMNS: tuple[str, ...] = (
    "speed",
    "odometer",
    "soc",
    "elevation",
    "est_heading",
    "est_lat",
    "est_lng",
    "power",
    "shift_state",
    "range",
    "est_range",
    "heading",
)

#: Message carried by the error emitted when the server ends a stream.
STREAM_CLOSED_MESSAGE = "HTTP stream closed"

#: Default capacity of a stream's event queue.
DEFAULT_STREAM_QUEUE_SIZE = 100

#: Default per-request timeout in seconds for commands and reads.
DEFAULT_REQUEST_TIMEOUT = 30.0
