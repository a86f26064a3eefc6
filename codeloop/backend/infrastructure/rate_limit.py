"""Classification of provider exceptions as rate-limit signals."""

import litellm

_RATE_LIMIT_MARKERS = ("429", "resource_exhausted", "rate limit", "ratelimit")


def is_rate_limit_error(exc: BaseException) -> bool:
    """Return True if exc signals HTTP 429 or quota exhaustion.

    Checks litellm's exception type, an HTTP status attribute, and finally
    well-known markers in the message for providers that only report text.
    """
    if isinstance(exc, litellm.RateLimitError):
        return True
    if getattr(exc, "status_code", None) == 429:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _RATE_LIMIT_MARKERS)
