"""Exception types for archive traversal errors.

Two families live here. Assumption exceptions describe pages whose structure
or content could not be used at all. Transient exceptions describe fetch
failures (timeouts, unexpected status codes) that might succeed if the caller
tries again later; this package never retries them itself.
"""

from typing import Any


class ScraperAssumptionException(Exception):
    """Base class for assumption violations about the archive site.

    Subclasses provide specific context about what assumption was violated.
    """

    def __init__(
        self,
        message: str,
        request_url: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the assumption violation.
            request_url: The URL of the request that triggered this error.
            context: Optional dict of additional context (selector, counts, etc).
        """
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        parts.append(f"URL: {self.request_url}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class HTMLStructuralAssumptionException(ScraperAssumptionException):
    """Raised when a checked query returns an unexpected number of elements.

    Attributes:
        selector: The XPath or CSS selector that was used.
        selector_type: Type of selector ("xpath" or "css").
        is_element_query: True if querying for elements, False for strings.
    """

    def __init__(
        self,
        selector: str,
        selector_type: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        request_url: str,
        is_element_query: bool = True,
    ) -> None:
        self.selector = selector
        self.selector_type = selector_type
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count
        self.is_element_query = is_element_query

        if expected_max is None:
            expected_str = f"at least {expected_min}"
        elif expected_min == expected_max:
            expected_str = f"exactly {expected_min}"
        else:
            expected_str = f"between {expected_min} and {expected_max}"

        message = (
            f"HTML structure mismatch: Expected {expected_str} "
            f"elements for '{description}', but found {actual_count}"
        )

        context = {
            "selector": selector,
            "selector_type": selector_type,
            "expected_min": expected_min,
            "expected_max": expected_max
            if expected_max is not None
            else "unlimited",
            "actual_count": actual_count,
            "is_element_query": is_element_query,
        }

        super().__init__(message, request_url, context)


class DocumentParseException(ScraperAssumptionException):
    """Raised when a fetched body cannot be parsed as an HTML document.

    Attributes:
        content_type: The Content-Type header of the response, if any.
    """

    def __init__(self, request_url: str, content_type: str | None) -> None:
        self.content_type = content_type
        super().__init__(
            "Response body is not a parsable HTML document",
            request_url,
            {"content_type": content_type or "unknown"},
        )


class TransientException(Exception):
    """Base class for fetch failures that might resolve on a later attempt.

    The traversal layer propagates these unmodified; whether and when to try
    again is the caller's decision.
    """

    pass


class HTMLResponseAssumptionException(TransientException):
    """Raised when an HTTP response has an unexpected status code.

    Attributes:
        status_code: The actual HTTP status code received.
        expected_codes: List of status codes that were expected.
        url: The URL that returned the unexpected status.
        message: Human-readable error message.
    """

    def __init__(
        self,
        status_code: int,
        expected_codes: list[int],
        url: str,
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        self.url = url

        expected_str = ", ".join(str(code) for code in expected_codes)
        self.message = (
            f"HTTP {status_code} from {url} (expected one of: {expected_str})"
        )
        super().__init__(self.message)


class RequestTimeoutException(TransientException):
    """Raised when a request times out.

    Attributes:
        url: The URL that timed out.
        timeout_seconds: The timeout duration in seconds.
        message: Human-readable error message.
    """

    def __init__(self, url: str, timeout_seconds: float | None) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.message = f"Request to {url} timed out after {timeout_seconds}s"
        super().__init__(self.message)
