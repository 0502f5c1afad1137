"""Per-layer progress tracking for an image pull driven by daemon status events."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class PullPhase(IntEnum):
    UNKNOWN = 0
    WAITING = 1
    PULLING_FS = 2
    DOWNLOADING = 3
    DOWNLOAD_COMPLETE = 4
    EXTRACTING = 5
    VERIFYING_CHECKSUM = 6
    ALREADY_EXISTS = 7
    PULL_COMPLETE = 8


_PHASES = {
    "Waiting": PullPhase.WAITING,
    "Pulling fs layer": PullPhase.PULLING_FS,
    "Downloading": PullPhase.DOWNLOADING,
    "Download complete": PullPhase.DOWNLOAD_COMPLETE,
    "Extracting": PullPhase.EXTRACTING,
    "Verifying Checksum": PullPhase.VERIFYING_CHECKSUM,
    "Already exists": PullPhase.ALREADY_EXISTS,
    "Pull complete": PullPhase.PULL_COMPLETE,
}


@dataclass
class Progress:
    """A manually updated progress counter."""

    n: int = 0
    total: int = 0
    completed: bool = False

    def set_completed(self) -> None:
        self.completed = True


@dataclass
class LayerState:
    phase: PullPhase
    phase_progress: Progress | None
    download_progress: Progress | None


class PullStatus:
    """Thread-safe pull state for every layer seen in the event stream."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._phase_progress: dict[str, Progress] = {}
        self._download_progress: dict[str, Progress] = {}
        self._phase: dict[str, PullPhase] = {}
        self._layers: list[str] | None = None
        self.complete = False

    def layers(self) -> list[str]:
        """Return the layer IDs in the order they first appeared."""
        with self._lock:
            return list(self._layers or ())

    def current(self, layer: str) -> LayerState:
        with self._lock:
            return LayerState(
                phase=self._phase.get(layer, PullPhase.UNKNOWN),
                phase_progress=self._phase_progress.get(layer),
                download_progress=self._download_progress.get(layer),
            )

    def on_event(self, event: Mapping[str, Any]) -> None:
        """Record one decoded pull status event."""
        with self._lock:
            layer = event.get("id") or ""
            if not layer:
                return

            if layer not in self._phase_progress:
                # the first identified event names the image itself, not a layer
                if self._layers is None:
                    self._layers = []
                    return
                self._phase_progress[layer] = Progress()
                self._download_progress[layer] = Progress()
                self._layers.append(layer)

            detail = event.get("progressDetail") or {}
            current = int(detail.get("current", 0))
            total = int(detail.get("total", 0))

            phase = _PHASES.get(event.get("status", ""), PullPhase.UNKNOWN)
            self._phase[layer] = phase

            phase_progress = self._phase_progress[layer]
            if phase >= PullPhase.ALREADY_EXISTS:
                phase_progress.set_completed()
            else:
                phase_progress.n = current
                phase_progress.total = total

            download = self._download_progress[layer]
            if phase == PullPhase.DOWNLOADING:
                download.n = current
                download.total = total
            elif phase >= PullPhase.DOWNLOAD_COMPLETE:
                download.n = download.total
                download.set_completed()