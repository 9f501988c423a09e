"""Thin client for the songs endpoints of the ministry REST API.

Only the request/response contracts live here; the service itself is
external.  Every call sends JSON and, when a token is configured, an
``Authorization: Bearer <token>`` header.

Endpoints::

    GET  /api/songs/{id}
    POST /api/songs                  {title, artist, key, lyricsLines, notes?}
    PUT  /api/songs/{id}             same body
    POST /api/songs/chordpro         {chordProText}
    PUT  /api/songs/{id}/chordpro    {chordProText}
    POST /api/songs/{id}/transpose   {newKey}
"""

import logging

import httpx

from .exceptions import ApiError
from .models import DEFAULT_KEY, LyricLine, ParsedSong, SongMetadata

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


def song_from_payload(data: dict) -> ParsedSong:
    """Build a :class:`~lyric2pro.models.ParsedSong` from a song returned by the API."""
    metadata = SongMetadata(
        title=data.get("title") or "",
        artist=data.get("artist") or "",
        key=data.get("key") or DEFAULT_KEY,
        notes=data.get("notes") or "",
    )
    lines = [LyricLine.from_dict(line) for line in data.get("lyricsLines") or []]
    return ParsedSong.from_lyrics_lines(metadata, lines)


class ApiClient:
    """Songs API client.

    Args:
        base_url:  Root of the service, e.g. ``https://ministry.example.org``.
        token:     Bearer token; omitted from requests when None.
        timeout:   Seconds per request.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, body: dict | None = None) -> dict:
        logger.debug("%s %s", method, path)
        try:
            resp = self._http.request(method, path, json=body)
        except httpx.RequestError as exc:
            raise ApiError(path, 0, str(exc)) from exc
        if resp.is_error:
            raise ApiError(str(resp.request.url), resp.status_code, resp.text[:200])
        return resp.json()

    # --- Songs ---

    def get_song(self, song_id: str) -> dict:
        return self._request("GET", f"/api/songs/{song_id}")

    def create_song(self, song: ParsedSong) -> dict:
        return self._request("POST", "/api/songs", song.to_payload())

    def update_song(self, song_id: str, song: ParsedSong) -> dict:
        return self._request("PUT", f"/api/songs/{song_id}", song.to_payload())

    def create_song_chordpro(self, chordpro_text: str) -> dict:
        return self._request(
            "POST", "/api/songs/chordpro", {"chordProText": chordpro_text}
        )

    def update_song_chordpro(self, song_id: str, chordpro_text: str) -> dict:
        return self._request(
            "PUT", f"/api/songs/{song_id}/chordpro", {"chordProText": chordpro_text}
        )

    def transpose_song(self, song_id: str, new_key: str) -> dict:
        return self._request(
            "POST", f"/api/songs/{song_id}/transpose", {"newKey": new_key}
        )
