"""
Error types raised while crawling the anthology
"""

from typing import List, Sequence


class AnthologyError(Exception):
    """Base class for all crawler errors"""


class ConfigError(AnthologyError):
    """Required configuration is missing or invalid"""


class ManifestError(AnthologyError):
    """The conference manifest could not be read or has the wrong shape"""


class StructuralParseError(AnthologyError):
    """An index page has neither a #content element nor a <body>"""


class TransportError(AnthologyError):
    """Network-level failure (DNS, connection reset, timeout, broken stream)"""

    def __init__(self, url: str, cause: BaseException):
        self.url = url
        self.cause = cause
        super().__init__(f"request error {url}: {cause}")


class HTTPStatusError(AnthologyError):
    """The server answered with something other than 200"""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP response != 200 ({status_code}) for {url}")


class AggregateDownloadError(AnthologyError):
    """One or more file downloads in a batch failed"""

    def __init__(self, errors: Sequence[BaseException]):
        self.errors: List[BaseException] = list(errors)
        super().__init__(', '.join(str(error) for error in self.errors))
