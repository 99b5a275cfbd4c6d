"""HTTP client for the monitoring API."""
import time
import logging
import requests

logger = logging.getLogger("mtmonitor.http")


class APIError(Exception):
    """API request error with status code, response body, and server error code."""
    def __init__(self, message, status_code=None, response_body=None, code=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.code = code


class HTTPClient:
    """Thin JSON client over a requests session. One attempt per call."""

    def __init__(self, base_url, timeout=30, headers=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "MTMonitor/1.0",
            "Content-Type": "application/json",
        })
        if headers:
            self.session.headers.update(headers)

    def get(self, path="", params=None):
        return self.request("GET", path, params=params)

    def post(self, path="", json=None, params=None):
        return self.request("POST", path, params=params, json=json)

    def put(self, path="", json=None):
        return self.request("PUT", path, json=json)

    def delete(self, path="", params=None):
        return self.request("DELETE", path, params=params)

    def request(self, method, path, params=None, json=None):
        """Send one request and return the decoded body.

        Non-2xx responses raise APIError("HTTP Error: <status>"). Transport
        failures are wrapped in APIError as well so callers handle one type.
        """
        url = f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url
        try:
            start = time.time()
            resp = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
            latency = int((time.time() - start) * 1000)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request error for {method} {url}: {e}")
            raise APIError(f"Request failed: {e}") from e

        logger.debug(f"{method} {url} → {resp.status_code} ({latency}ms)")

        if not 200 <= resp.status_code < 300:
            raise APIError(
                f"HTTP Error: {resp.status_code}",
                status_code=resp.status_code,
                response_body=resp.text,
            )

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def close(self):
        self.session.close()
