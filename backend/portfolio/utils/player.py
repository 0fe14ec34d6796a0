"""Player state machine shared by the API and any rendering host.

    loading --frame load--> loaded
    loading --frame error / timeout / no embed--> errored

``loaded`` and ``errored`` are terminal for a given (platform, id) pair.
Rendering a different pair starts over in ``loading``; rendering the same
pair again leaves the current state alone.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from .embed import EmbedError, describe_video
from .video import coerce_reference

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Unable to load video — check the video URL format"
HISTORY_LIMIT = 50


class PlayerState(str, Enum):
    loading = "loading"
    loaded = "loaded"
    errored = "errored"


class PlayerErrorReason(str, Enum):
    missing_reference = "missing_reference"
    unsupported_platform = "unsupported_platform"
    frame_error = "frame_error"
    timeout = "timeout"


@dataclass(frozen=True)
class PlayerView:
    state: PlayerState
    embed_url: Optional[str]
    show_spinner: bool
    message: Optional[str] = None
    error: Optional[PlayerErrorReason] = None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "embed_url": self.embed_url,
            "show_spinner": self.show_spinner,
            "message": self.message,
            "error": self.error.value if self.error else None,
        }


def _pair(platform: Any, video_id: Any) -> Tuple[str, str]:
    p = platform.strip().lower() if isinstance(platform, str) else ""
    v = video_id.strip() if isinstance(video_id, str) else ""
    return p, v


class VideoPlayer:
    def __init__(
        self,
        load_timeout: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        on_error: Optional[Callable[[PlayerErrorReason], None]] = None,
    ) -> None:
        self.load_timeout = load_timeout
        self._clock = clock
        self._on_error = on_error
        self._key: Optional[Tuple[str, str]] = None
        self._embed_url: Optional[str] = None
        self._started_at = 0.0
        self.state = PlayerState.loading
        self.error: Optional[PlayerErrorReason] = None
        self.history: List[PlayerState] = []

    def render(self, platform: Any, video_id: Any) -> PlayerView:
        key = _pair(platform, video_id)
        if key != self._key:
            self._reset(key)
        else:
            self.poll()
        return self.view()

    def _reset(self, key: Tuple[str, str]) -> None:
        self._key = key
        self._embed_url = None
        self._started_at = self._clock()
        self.error = None
        self._enter(PlayerState.loading)

        result = describe_video(coerce_reference(*key))
        if not result.ok:
            reason = (
                PlayerErrorReason.unsupported_platform
                if result.error is EmbedError.unsupported_platform
                else PlayerErrorReason.missing_reference
            )
            logger.warning("Cannot play video platform=%r id=%r: %s", key[0], key[1], reason.value)
            self._fail(reason)
            return
        self._embed_url = result.descriptor.embed_url

    def _enter(self, state: PlayerState) -> None:
        self.state = state
        self.history.append(state)
        if len(self.history) > HISTORY_LIMIT:
            del self.history[: len(self.history) - HISTORY_LIMIT]

    def _fail(self, reason: PlayerErrorReason) -> None:
        self.error = reason
        self._enter(PlayerState.errored)
        if self._on_error is not None:
            self._on_error(reason)

    def frame_loaded(self) -> None:
        if self.state is PlayerState.loading and self._embed_url:
            self._enter(PlayerState.loaded)

    def frame_failed(self) -> None:
        if self.state is PlayerState.loading:
            logger.warning("Embedded frame failed to load: %s", self._embed_url)
            self._fail(PlayerErrorReason.frame_error)

    def poll(self) -> PlayerState:
        """Fail a load that has been pending longer than ``load_timeout``."""
        if self.state is PlayerState.loading and self._clock() - self._started_at >= self.load_timeout:
            logger.info("Video load timed out after %.1fs: %s", self.load_timeout, self._embed_url)
            self._fail(PlayerErrorReason.timeout)
        return self.state

    def view(self) -> PlayerView:
        if self.state is PlayerState.errored:
            return PlayerView(
                state=self.state,
                embed_url=None,
                show_spinner=False,
                message=FALLBACK_MESSAGE,
                error=self.error,
            )
        return PlayerView(
            state=self.state,
            embed_url=self._embed_url,
            show_spinner=self.state is PlayerState.loading,
        )
