"""Livepeer API client.

This module provides an HTTP client for the parts of the Livepeer API used
to transcode a file: broadcaster discovery, stream creation and deletion,
and segment submission to a broadcaster.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

import httpx

from livepeer_transcode.api.models import Stream
from livepeer_transcode.api.multipart import split_multipart
from livepeer_transcode.config.models import ApiConfig
from livepeer_transcode.exceptions import PushError, SessionError
from livepeer_transcode.profiles.models import RenditionProfile

logger = logging.getLogger(__name__)


class LivepeerClient:
    """HTTP client for the Livepeer API.

    The API client (bearer-authenticated) and the segment push client
    (talking to a broadcaster node) are created lazily and share the same
    timeout.
    """

    def __init__(
        self,
        config: ApiConfig,
        transport: httpx.BaseTransport | None = None,
        broadcasters: Sequence[str] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: API configuration with host, key and timeout.
            transport: Optional httpx transport (used by tests).
            broadcasters: Broadcaster URLs to use instead of discovering them.
        """
        if not config.api_key:
            raise SessionError("An API key is required")
        self._base_url = config.base_url
        self._api_key = config.api_key
        self._timeout = config.timeout_seconds
        self._transport = transport
        self._broadcasters: list[str] = list(broadcasters or [])
        self._server: str | None = None
        self._client: httpx.Client | None = None
        self._push_client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the API client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=self._headers(),
                transport=self._transport,
            )
        return self._client

    def _get_push_client(self) -> httpx.Client:
        """Get or create the broadcaster client."""
        if self._push_client is None:
            self._push_client = httpx.Client(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._push_client

    def _headers(self) -> dict[str, str]:
        """Get request headers with the API key."""
        return {"Authorization": f"Bearer {self._api_key}"}

    def close(self) -> None:
        """Close the HTTP clients."""
        for client in (self._client, self._push_client):
            if client is not None:
                client.close()
        self._client = None
        self._push_client = None

    def __enter__(self) -> LivepeerClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_broadcasters(self) -> list[str]:
        """Get the addresses of the broadcasters available to this key.

        Raises:
            SessionError: If the request fails.
        """
        client = self._get_client()
        try:
            response = client.get("/api/broadcaster")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise SessionError(f"Failed to get broadcasters: {e}") from e
        except ValueError as e:
            raise SessionError(f"Invalid broadcaster list: {e}") from e
        return [b["address"] for b in data if isinstance(b, dict) and b.get("address")]

    @property
    def server(self) -> str:
        """The broadcaster chosen for segment pushes.

        Picked at random from the known or discovered broadcasters on first
        access.

        Raises:
            SessionError: If no broadcaster is available.
        """
        if self._server is None:
            if not self._broadcasters:
                self._broadcasters = self.get_broadcasters()
            if not self._broadcasters:
                raise SessionError("No broadcasters available")
            self._server = random.choice(self._broadcasters).rstrip("/")
        return self._server

    def create_stream(
        self,
        name: str,
        presets: Sequence[str] = (),
        profiles: Sequence[RenditionProfile] = (),
        record: bool = False,
    ) -> Stream:
        """Create a stream that transcodes to the given renditions.

        Raises:
            SessionError: If the stream cannot be created.
        """
        payload: dict[str, object] = {"name": name, "record": record}
        if presets:
            payload["presets"] = list(presets)
        if profiles:
            payload["profiles"] = [profile.to_api() for profile in profiles]

        client = self._get_client()
        try:
            response = client.post("/api/stream", json=payload)
            response.raise_for_status()
            return Stream.from_api(response.json())
        except httpx.HTTPStatusError as e:
            raise SessionError(
                f"Failed to create stream: {e} ({e.response.text.strip()})"
            ) from e
        except httpx.HTTPError as e:
            raise SessionError(f"Failed to create stream: {e}") from e
        except (KeyError, ValueError) as e:
            raise SessionError(f"Invalid stream response: {e}") from e

    def delete_stream(self, stream_id: str) -> None:
        """Delete a stream.

        Raises:
            SessionError: If the request fails.
        """
        client = self._get_client()
        try:
            response = client.delete(f"/api/stream/{stream_id}")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SessionError(f"Failed to delete stream {stream_id}: {e}") from e

    def push_segment(
        self, stream_id: str, seq_no: int, duration: float, data: bytes
    ) -> list[bytes]:
        """Push one segment and collect the transcoded renditions.

        Args:
            stream_id: Stream to push to.
            seq_no: Segment sequence number.
            duration: Segment duration in seconds.
            data: MPEG-TS segment bytes.

        Returns:
            Transcoded segment bytes, one entry per rendition in request order.

        Raises:
            PushError: On network failure, timeout, non-200 status or a
                response that is not multipart.
        """
        url = f"{self.server}/live/{stream_id}/{seq_no}.ts"
        headers = {
            "Accept": "multipart/mixed",
            "Content-Duration": str(int(duration * 1000)),
        }
        client = self._get_push_client()
        try:
            response = client.post(url, content=data, headers=headers)
        except httpx.TimeoutException as e:
            raise PushError(f"Segment {seq_no} push timed out: {e}", seq_no) from e
        except httpx.HTTPError as e:
            raise PushError(f"Segment {seq_no} push failed: {e}", seq_no) from e

        if response.status_code != httpx.codes.OK:
            raise PushError(
                f"Segment {seq_no} push failed: status {response.status_code} "
                f"({response.text.strip()})",
                seq_no,
            )

        content_type = response.headers.get("Content-Type", "")
        try:
            return split_multipart(content_type, response.content)
        except ValueError as e:
            raise PushError(f"Segment {seq_no}: {e}", seq_no) from e
