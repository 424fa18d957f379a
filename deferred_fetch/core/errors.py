class FetchError(Exception):
    """Base class for failures inside the fetch pipeline."""

class InvalidURLError(FetchError):
    pass

class BlockedURLError(FetchError):
    """Target host resolves to a private or internal address."""

    def __init__(self, url: str):
        super().__init__(
            f"Fetcher blocked an attempt to fetch a private IP {url}. "
            "This is to prevent a security vulnerability where a local agent "
            "could fetch privileged local IPs and exfiltrate data."
        )
        self.url = url

class DirectoryCreationError(FetchError):
    pass

class HttpStatusError(FetchError):
    def __init__(self, status_code: int):
        super().__init__(f"HTTP error: {status_code}")
        self.status_code = status_code

class TransformError(FetchError):
    pass
