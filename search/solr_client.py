"""
Client for interacting with the Solr select API.
"""
import logging
import requests
from typing import Dict, Any, Optional

from config import settings
from search.models import ParamValue

logger = logging.getLogger(__name__)


class SolrClientError(Exception):
    """Raised when Solr cannot be reached or returns an unusable response."""


class SolrClient:
    """
    A thin client for the Solr ``select`` handler.

    Handles the request method, the JSON response writer and error handling.
    """
    def __init__(self, base_url: str = settings.SOLR_URL, timeout: int = settings.SOLR_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, query: str, start: int = 0, rows: int = 10,
               params: Optional[Dict[str, ParamValue]] = None, method: str = "GET") -> Dict[str, Any]:
        """
        Runs a query against Solr.

        Args:
            query: The ``q`` parameter.
            start: Offset of the first row.
            rows: Number of rows to return.
            params: Additional parameters. List values are sent as repeated keys.
            method: "GET" or "POST". POST sends the parameters form-encoded.

        Returns:
            The decoded JSON response.

        Raises:
            SolrClientError: On transport errors, HTTP errors or undecodable bodies.
        """
        url = f"{self.base_url}/select"
        payload = {"q": query, "start": start, "rows": rows, "wt": "json"}
        for key, value in (params or {}).items():
            if value is None:
                continue
            payload[key] = value

        method = method.upper()
        try:
            if method == "POST":
                response = self.session.post(url, data=payload, timeout=self.timeout)
            else:
                response = self.session.get(url, params=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error searching Solr at {url}: {e}")
            raise SolrClientError(str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Solr returned a non-JSON response: {e}")
            raise SolrClientError("Invalid JSON in Solr response") from e

    def ping(self) -> bool:
        try:
            response = self.session.get(f"{self.base_url}/admin/ping", params={"wt": "json"}, timeout=3)
            return response.status_code == 200
        except requests.exceptions.RequestException as e:
            logger.debug(f"Solr connection error: {e}")
            return False
