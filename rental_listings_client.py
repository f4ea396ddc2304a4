"""Rental listings API client.

This module defines a small client wrapper around the listings REST
API served by ``rental_listings_api``.  It is used by the seed script
and can be used by any Python tool that needs to read or manage
listings.  The client uses the ``requests`` library internally.

The client exposes high‑level methods for every listing operation:

* :meth:`list_properties` – search listings with the same filters as the web UI.
* :meth:`get_property` – fetch a single listing by its identifier.
* :meth:`create_property` – submit a new listing.
* :meth:`update_property` – change some fields of a listing.
* :meth:`delete_property` – remove a listing.
* :meth:`get_info` – service information and amenity options.

Every method returns a tuple ``(result, error)``.  On success ``error``
is ``None``; on failure ``result`` is empty and ``error`` is a
dictionary with ``status_code`` and ``message`` keys, so callers never
have to catch HTTP exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class RentalListingsAPI:
    """Client for interacting with the rental listings API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_prefix: str = "/api",
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:8000``.
            api_prefix: Prefix the routes are mounted under.
            timeout: Per-request timeout in seconds.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        prefix = api_prefix.strip("/")
        self.base_url = base_url.rstrip("/") + (f"/{prefix}" if prefix else "")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Any = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``.  ``data`` contains the parsed JSON
            response on success and ``error`` is ``None``.  On failure,
            ``data`` is ``None`` and ``error`` describes the issue.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Listing operations
    # ------------------------------------------------------------------
    def list_properties(
        self,
        *,
        q: Optional[str] = None,
        location: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        min_bedrooms: Optional[int] = None,
        min_bathrooms: Optional[int] = None,
        amenities: Iterable[str] = (),
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Search listings.  Unset filters are not sent."""
        params: List[Tuple[str, Any]] = []
        for name, value in (
            ("q", q),
            ("location", location),
            ("minPrice", min_price),
            ("maxPrice", max_price),
            ("minBedrooms", min_bedrooms),
            ("minBathrooms", min_bathrooms),
        ):
            if value is not None:
                params.append((name, value))
        params.extend(("amenities", amenity) for amenity in amenities)
        data, error = self._request("GET", "/properties", params=params)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def get_property(self, property_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/properties/{property_id}")

    def create_property(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Submit a new listing.

        Returns:
            A tuple ``(property, error)``; ``property`` is the stored
            listing including its new ``id``.
        """
        data, error = self._request("POST", "/properties", json_body=payload)
        if error:
            return None, error
        return (data or {}).get("property"), None

    def update_property(
        self, property_id: str, changes: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("PUT", f"/properties/{property_id}", json_body=changes)
        if error:
            return None, error
        return (data or {}).get("property"), None

    def delete_property(self, property_id: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/properties/{property_id}")
        if error:
            return False, error
        return True, None

    def get_info(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/info")
