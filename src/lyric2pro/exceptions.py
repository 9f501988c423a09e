class Lyric2ProError(Exception):
    """Base exception for lyric2pro."""


class ApiError(Lyric2ProError):
    """Raised when a request to the songs API fails.

    ``status_code`` is 0 when no HTTP response was received.
    """

    def __init__(self, url: str, status_code: int, detail: str = ""):
        self.url = url
        self.status_code = status_code
        self.detail = detail
        message = f"HTTP {status_code} calling {url}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class UnknownDetectorError(Lyric2ProError):
    """Raised when no chord-line detector is registered under a name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No chord-line detector named: {name}")
