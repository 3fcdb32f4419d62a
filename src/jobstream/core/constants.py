"""Constants for the jobstream wire protocol."""


# Event kinds (closed set)
KIND_INFO = "info"
KIND_SUCCESS = "success"
KIND_ERROR = "error"
KIND_WARNING = "warning"
KIND_PROGRESS = "progress"

# SSE framing
FRAME_PREFIX = b"data: "
FRAME_TERMINATOR = b"\n\n"

# Key the consumer watches for; present on the terminal record only
DONE_KEY = "done"

# Negotiation: ?stream=true selects the streaming transport
STREAM_QUERY_PARAM = "stream"
STREAM_TRUE_TOKEN = "true"

STREAM_MEDIA_TYPE = "text/event-stream"

STREAM_HEADERS: dict[str, str] = {
    "Content-Type": STREAM_MEDIA_TYPE,
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # disable nginx buffering
}
