"""Shared HTTP helpers for the release providers and the downloader."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

import requests

from ._errors import RequestError

if TYPE_CHECKING:
    from collections.abc import Mapping

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
USER_AGENT: Final[str] = "lilyenv"


def new_session(headers: Mapping[str, str] | None = None) -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    if headers:
        session.headers.update(headers)
    return session


def get(session: requests.Session, url: str, **kwargs: Any) -> requests.Response:
    """Issue a GET, turning transport failures and error statuses into :class:`RequestError`."""
    _LOGGER.debug("GET %s", url)
    try:
        response = session.get(url, **kwargs)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise RequestError(str(exc)) from exc
    _LOGGER.debug("GET %s -> %s", url, response.status_code)
    return response


__all__ = [
    "USER_AGENT",
    "get",
    "new_session",
]
