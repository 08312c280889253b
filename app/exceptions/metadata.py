from .base import AppException, ErrorCode


class MissingParameterException(AppException):
    """Raised when a required query parameter is missing or blank"""

    def __init__(self, name: str = "URL"):
        super().__init__(
            code=ErrorCode.MISSING_PARAMETER,
            message=f"{name} parameter is required",
            status_code=400
        )


class InvalidURLException(AppException):
    """Raised when a URL is malformed or a platform identifier cannot be parsed from it"""

    def __init__(self, url: str = "", reason: str = ""):
        details = {"url": url}
        if reason:
            details["reason"] = reason

        super().__init__(
            code=ErrorCode.INVALID_URL,
            message="Invalid URL format",
            status_code=400,
            details=details
        )


class FetchException(AppException):
    """Raised when fetching a remote resource fails"""

    def __init__(
        self,
        url: str = "",
        reason: str = "",
        code: ErrorCode = ErrorCode.FETCH_FAILED,
        status_code: int = 502
    ):
        details = {"url": url}
        if reason:
            details["reason"] = reason

        message = f"Failed to fetch {url}" if url else "Failed to fetch remote content"
        if reason:
            message = f"{message}: {reason}"

        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=details
        )


class FetchTimeoutException(FetchException):
    """Raised when a fetch does not complete within its timeout"""

    def __init__(self, url: str = "", timeout: float = 0):
        super().__init__(
            url=url,
            reason=f"timed out after {timeout:g}s" if timeout else "timed out",
            code=ErrorCode.FETCH_TIMEOUT,
            status_code=504
        )
        self.timeout = timeout


class FetchHTTPErrorException(FetchException):
    """Raised when a fetch returns a non-2xx status"""

    def __init__(self, url: str = "", http_status: int = 0):
        super().__init__(
            url=url,
            reason=f"HTTP error! status: {http_status}",
            code=ErrorCode.FETCH_HTTP_ERROR,
            status_code=502
        )
        self.http_status = http_status


class ParseErrorException(AppException):
    """Raised when a fetched document does not have the expected shape"""

    def __init__(self, url: str = "", reason: str = ""):
        details = {"url": url}
        if reason:
            details["reason"] = reason

        super().__init__(
            code=ErrorCode.PARSE_ERROR,
            message=f"Failed to parse content from {url}" if url else "Failed to parse content",
            status_code=502,
            details=details
        )


class PlatformAPIErrorException(AppException):
    """Raised when a platform oEmbed endpoint returns an unusable response"""

    def __init__(self, platform: str = "", url: str = "", reason: str = ""):
        details = {"url": url, "platform": platform}
        if reason:
            details["reason"] = reason

        super().__init__(
            code=ErrorCode.PLATFORM_API_ERROR,
            message=f"{platform} API error for {url}" if platform and url else "Platform API error",
            status_code=502,
            details=details
        )


class RefreshInProgressException(AppException):
    """Raised when a metadata refresh is started while another one is running"""

    def __init__(self):
        super().__init__(
            code=ErrorCode.REFRESH_IN_PROGRESS,
            message="A metadata refresh is already running",
            status_code=409
        )
