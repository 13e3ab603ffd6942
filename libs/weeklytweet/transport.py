import logging
from typing import Optional

import requests

from .oauth1 import SigningRequest

logger = logging.getLogger(__name__)


# Raised if an HTTP exchange fails or returns a non-2xx status
class TransportError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super(TransportError, self).__init__(message)
        self.status_code = status_code


class HttpTransport:
    """
    Sends (signed) requests with `requests` and returns the response body.
    """

    def __init__(self, *, session: Optional[requests.Session] = None, timeout: float = 30.):
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, request: SigningRequest) -> bytes:
        logger.info(f"{request.method} {request.url}")
        try:
            response = self.session.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"HTTP call failed: {e}") from e
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"HTTP call to {request.url} failed with status {response.status_code}: {response.text}",
                response.status_code)
        return response.content
