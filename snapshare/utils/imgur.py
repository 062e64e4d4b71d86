"""Low-level API client for the Imgur image hosting service.

Uploads anonymous images with an application client ID, using the Imgur
REST API v3.

Imgur API Documentation:
    https://apidocs.imgur.com/

Example usage:
    >>> from snapshare.utils.imgur import get_imgur_client
    >>> client = get_imgur_client()
    >>> info = client.upload_image(Path("capture.png"), title="My capture")
    >>> print(info.page)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from pathlib import Path

from snapshare.config import settings
from snapshare.utils.network import snap_req

_logger = logging.getLogger(__name__)

IMGUR_PAGE_URL = "https://imgur.com/"


class ImgurError(Exception):
    """Base exception for Imgur API errors."""


class ImgurAuthenticationError(ImgurError):
    """Authentication failed (invalid or missing client ID)."""


class ImgurUploadError(ImgurError):
    """The upload was rejected or the response could not be understood."""


@dataclass(frozen=True)
class ImgurInfo:
    """What Imgur reports about an uploaded image.

    Parameters
    ----------
    id
        Imgur image identifier
    original
        Direct link to the image file
    page
        Link to the image page on imgur.com
    delete_hash
        Hash that allows deleting the anonymous upload later
    title
        Title sent with the upload
    """

    id: str
    original: str
    page: str
    delete_hash: str | None = None
    title: str | None = None


class ImgurClient:
    """Low-level client for anonymous uploads to the Imgur API.

    Parameters
    ----------
    api_url : str
        Root of the Imgur API, e.g. "https://api.imgur.com/3/"
    client_id : str
        Client ID of a registered Imgur application
    """

    def __init__(self, api_url: str, client_id: str):
        self.api_url = api_url if api_url.endswith("/") else f"{api_url}/"
        self.client_id = client_id
        self.upload_endpoint = f"{self.api_url}image"

    def upload_image(
        self,
        path: Path,
        *,
        title: str | None = None,
        filename: str | None = None,
    ) -> ImgurInfo:
        """Upload an image file.

        Parameters
        ----------
        path
            The image file to upload
        title
            Title of the image on Imgur
        filename
            Name of the image on Imgur (defaults to the file name)

        Returns
        -------
        ImgurInfo
            Identifiers and links of the uploaded image

        Raises
        ------
        ImgurAuthenticationError
            If the client ID is rejected (401/403)
        ImgurUploadError
            For any other failed upload
        """
        name = filename or Path(path).name
        data = {"type": "file", "name": name}
        if title:
            data["title"] = title

        try:
            with Path(path).open("rb") as fh:
                response = snap_req(
                    self.upload_endpoint,
                    "POST",
                    headers={"Authorization": f"Client-ID {self.client_id}"},
                    data=data,
                    files={"image": (name, fh)},
                )
        except OSError as e:
            msg = f"Upload to Imgur failed: {e}"
            raise ImgurUploadError(msg) from e

        if response.status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            msg = "Authentication failed - check SNAP_IMGUR_CLIENT_ID"
            raise ImgurAuthenticationError(msg)

        if response.status_code != HTTPStatus.OK:
            msg = (
                f"Imgur upload failed with status {response.status_code}: "
                f"{response.text}"
            )
            raise ImgurUploadError(msg)

        try:
            payload = response.json()["data"]
            image_id = payload["id"]
            info = ImgurInfo(
                id=image_id,
                original=payload["link"],
                page=f"{IMGUR_PAGE_URL}{image_id}",
                delete_hash=payload.get("deletehash"),
                title=payload.get("title"),
            )
        except (ValueError, KeyError, TypeError) as e:
            msg = f"Failed to parse Imgur response: {e}"
            raise ImgurUploadError(msg) from e

        _logger.info("Uploaded %s to Imgur: %s", name, info.page)
        return info


def get_imgur_client() -> ImgurClient:
    """Get configured Imgur client from settings.

    Returns
    -------
    ImgurClient
        Configured client instance

    Raises
    ------
    ValueError
        If SNAP_IMGUR_CLIENT_ID is not configured
    """
    if not settings.SNAP_IMGUR_CLIENT_ID:
        msg = "SNAP_IMGUR_CLIENT_ID not configured"
        raise ValueError(msg)

    return ImgurClient(
        api_url=str(settings.SNAP_IMGUR_API_URL),
        client_id=settings.SNAP_IMGUR_CLIENT_ID,
    )
