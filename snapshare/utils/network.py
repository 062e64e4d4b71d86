"""Network and HTTP utilities for snapshare."""

import logging
import tempfile
import time
from pathlib import Path

import certifi
from requests import Session
from requests.adapters import HTTPAdapter

from snapshare.config import settings
from snapshare.version import __version__

_logger = logging.getLogger(__name__)
_ssl_warning_logged = False


def get_ca_bundle_content() -> list[bytes] | None:
    """
    Get the custom CA bundle configured for snapshare, if any.

    ``SNAP_CERT_BUNDLE`` takes precedence over ``SNAP_CERT_BUNDLE_FILE``.

    Returns
    -------
    list[bytes] | None
        The lines of the certificate bundle, or None if none is configured
    """
    if settings.SNAP_CERT_BUNDLE:
        return [
            f"{line}\n".encode() for line in settings.SNAP_CERT_BUNDLE.split("\n")
        ]
    if settings.SNAP_CERT_BUNDLE_FILE:
        with Path(settings.SNAP_CERT_BUNDLE_FILE).open(mode="rb") as our_cert:
            return our_cert.readlines()
    return None


def snap_req(
    url: str,
    function: str,
    *,
    retries: int = 5,
    headers: dict | None = None,
    **kwargs: dict | None,
):
    """
    Make a request from snapshare.

    A helper method that wraps a function from :py:mod:`requests`, but adds a
    local certificate authority chain to validate any custom certificates.
    Will automatically retry on transient server errors (502, 503, 504) with
    exponential backoff.

    Parameters
    ----------
    url
        The URL to fetch
    function
        The function from the ``requests`` library to use (e.g.
        ``'GET'``, ``'POST'``, ``'PATCH'``, etc.)
    retries
        The maximum number of retry attempts (total attempts = retries + 1)
    headers
        Headers sent with every attempt (a snapshare User-Agent is added)
    **kwargs :
        Other keyword arguments are passed along to the ``fn``

    Returns
    -------
    r : :py:class:`requests.Response`
        A requests response object
    """
    # Status codes that should trigger a retry (transient server errors)
    retry_status_codes = {502, 503, 504}

    s = Session()
    s.mount("https://", HTTPAdapter())
    s.mount("http://", HTTPAdapter())

    headers = {"User-Agent": f"snapshare/{__version__}", **(headers or {})}
    verify_arg = True
    response = None

    # honour SNAP_DISABLE_SSL_VERIFY (warn once per process)
    global _ssl_warning_logged  # noqa: PLW0603
    if settings.SNAP_DISABLE_SSL_VERIFY:
        verify_arg = False
        if not _ssl_warning_logged:
            _logger.warning(
                "SNAP_DISABLE_SSL_VERIFY is enabled; SSL certificate "
                "verification is disabled for all requests. This should "
                "only be used during local development or testing."
            )
            _ssl_warning_logged = True

    with tempfile.NamedTemporaryFile() as tmp:
        if verify_arg is not False and (ca_bundle_content := get_ca_bundle_content()):
            with Path(certifi.where()).open(mode="rb") as sys_cert:
                lines = sys_cert.readlines()
            tmp.writelines(lines)
            tmp.writelines(ca_bundle_content)
            tmp.seek(0)
            verify_arg = tmp.name

        for attempt in range(retries + 1):
            # rewind file uploads so a retried request sends the whole body
            for _, value in (kwargs.get("files") or {}).items():
                fh = value[1] if isinstance(value, tuple) else value
                if hasattr(fh, "seek"):
                    fh.seek(0)

            response = s.request(
                function, url, headers=headers, verify=verify_arg, **kwargs
            )

            if response.status_code not in retry_status_codes:
                return response

            if attempt == retries:
                _logger.warning(
                    "Request to %s failed with %s after %s attempts",
                    url,
                    response.status_code,
                    retries + 1,
                )
                return response

            # Calculate backoff delay: 1s, 2s, 4s, 8s, etc.
            delay = 2**attempt
            _logger.debug(
                "Request to %s returned %s, retrying in %ss (attempt %s/%s)",
                url,
                response.status_code,
                delay,
                attempt + 1,
                retries + 1,
            )
            time.sleep(delay)

    return response  # pragma: no cover
