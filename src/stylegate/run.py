"""Per-run signalling channel and the invocation descriptor passed through a run."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from stylegate import log
from stylegate.errors import PluginError


ErrorListener = Callable[[PluginError], None]


class RunChannel:
    """Error/end signals for one run.

    Every stage of one task receives the same channel. An ``error`` marks the
    run as failed for whoever drives it (the CLI turns that into its exit
    code); ``end`` marks that the task's pipeline was terminated early.
    """

    def __init__(self) -> None:
        self.errors: list[PluginError] = []
        self.ended = False
        self._listeners: list[ErrorListener] = []

    def on_error(self, listener: ErrorListener) -> None:
        self._listeners.append(listener)

    def child(self) -> RunChannel:
        """A channel for one task of this run: its errors are forwarded here, its end stays its own."""
        channel = RunChannel()
        channel.on_error(self.error)
        return channel

    def error(self, err: PluginError) -> None:
        self.errors.append(err)
        log.debug(f"run error from {err.plugin}: {err.message.strip()}")
        for listener in self._listeners:
            listener(err)

    def end(self) -> None:
        self.ended = True

    @property
    def failed(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class Invocation:
    """Who asked for this call.

    ``requested`` holds the ``task:func`` labels the user named for this run.
    ``stack`` holds the labels of the calls that led here, outermost first.
    """

    requested: tuple[str, ...] = ()
    stack: tuple[str, ...] = field(default=())

    def child(self, label: str) -> Invocation:
        return Invocation(requested=self.requested, stack=(*self.stack, label))

    def is_requested(self, label: str) -> bool:
        return label in self.requested

    def is_current_or_parent(self, label: str) -> bool:
        """True when *label* or any call that transitively invoked it was requested."""
        if self.is_requested(label):
            return True
        return any(self.is_requested(parent) for parent in self.stack if parent != label)
