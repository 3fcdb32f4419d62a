"""Decide between the streaming transport and a single batch response."""

from ..core.constants import STREAM_QUERY_PARAM, STREAM_TRUE_TOKEN


def wants_streaming(request) -> bool:
    """True when the caller asked for ``?stream=true``.

    Accepts a Starlette Request or anything with a ``query_params``
    mapping, or a plain mapping of query parameters. Any other value of
    the flag, or its absence, means batch mode. A repeated flag is decided
    by its first occurrence, as URLSearchParams.get does in browsers.
    """
    params = getattr(request, "query_params", request)
    getlist = getattr(params, "getlist", None)
    try:
        if getlist is not None:
            values = getlist(STREAM_QUERY_PARAM)
            value = values[0] if values else None
        else:
            value = params.get(STREAM_QUERY_PARAM)
    except AttributeError:
        return False
    return value == STREAM_TRUE_TOKEN
