import logging
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from typing import Dict, Optional

from apigen.errors import FetchError

logger = logging.getLogger('apigen')


class HTTPClient:
    """HTTP client for fetching documentation pages."""

    def __init__(self, retry_attempts: int = 0, timeout: Optional[float] = None,
                 headers: Optional[Dict[str, str]] = None):
        """
        Initialize HTTP client.

        Args:
            retry_attempts (int): Number of retry attempts for failed requests
            timeout (float, optional): Request timeout in seconds, None waits forever
            headers (dict, optional): Extra headers sent with every request
        """
        self.timeout = timeout
        self.session = self._create_session(retry_attempts)
        if headers:
            self.session.headers.update(headers)

    def _create_session(self, retry_attempts: int) -> requests.Session:
        """
        Create a requests session with retry configuration.

        Args:
            retry_attempts (int): Number of retry attempts

        Returns:
            requests.Session: Configured session
        """
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=retry_attempts,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD", "OPTIONS"],
            raise_on_status=False
        )

        # Mount adapter with retry strategy
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def get_text(self, url: str) -> str:
        """
        Fetch a page as decoded text.

        Args:
            url (str): URL to request

        Returns:
            str: Response body

        Raises:
            FetchError: On network failure or a non-200 response
        """
        logger.debug(f"Making GET request to {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        if response.status_code != 200:
            raise FetchError(url, f"HTTP {response.status_code}", response.status_code)

        if not response.encoding or response.encoding.lower() == 'iso-8859-1':
            response.encoding = response.apparent_encoding or 'utf-8'
        return response.text

    def close(self) -> None:
        """Close the session."""
        self.session.close()

    def __enter__(self) -> 'HTTPClient':
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit with cleanup."""
        self.close()
