"""User-facing feedback: alerts, confirmations, toasts and navigation."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

log = structlog.get_logger()

TOAST_HIDE_TRANSITION = 0.3  # seconds the hide transition runs before removal


@dataclass
class Toast:
    message: str
    kind: str = "success"
    visible: bool = False
    removed: bool = False
    _timers: list[asyncio.TimerHandle] = field(default_factory=list, repr=False)

    def cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()


class ToastArea:
    """Holds the single notification toast a page may show."""

    def __init__(self, display_seconds: float = 3.0) -> None:
        self.display_seconds = display_seconds
        self.current: Toast | None = None

    def show(self, message: str, kind: str = "success") -> Toast:
        if self.current is not None:
            self.remove(self.current)

        toast = Toast(message=message, kind=kind, visible=True)
        self.current = toast

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Outside an event loop the toast stays until replaced or hidden.
            loop = None
        if loop is not None:
            toast._timers.append(loop.call_later(self.display_seconds, self.hide, toast))

        log.debug("toast_shown", kind=kind, message=message)
        return toast

    def hide(self, toast: Toast) -> None:
        toast.visible = False
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.remove(toast)
            return
        toast._timers.append(loop.call_later(TOAST_HIDE_TRANSITION, self.remove, toast))

    def remove(self, toast: Toast) -> None:
        toast.cancel_timers()
        toast.visible = False
        toast.removed = True
        if self.current is toast:
            self.current = None


class Page:
    """What a handler may do to the page it runs on.

    ``confirm`` answers confirmation prompts; by default every prompt is
    accepted. Effects are recorded so callers can render or inspect them.
    """

    def __init__(
        self,
        confirm: Callable[[str], bool] | None = None,
        toast_seconds: float = 3.0,
    ) -> None:
        self._confirm = confirm or (lambda message: True)
        self.toasts = ToastArea(toast_seconds)
        self.alerts: list[str] = []
        self.navigated_to: str | None = None
        self.reloads = 0

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def confirm(self, message: str) -> bool:
        answer = bool(self._confirm(message))
        log.debug("confirm_prompt", message=message, accepted=answer)
        return answer

    def notify(self, message: str, kind: str = "success") -> Toast:
        return self.toasts.show(message, kind)

    def navigate(self, url: str) -> None:
        self.navigated_to = url

    def reload(self) -> None:
        self.reloads += 1

    def effects(self) -> dict:
        toast = self.toasts.current
        return {
            "alerts": list(self.alerts),
            "toast": {"message": toast.message, "kind": toast.kind} if toast else None,
            "navigate": self.navigated_to,
            "reload": self.reloads > 0,
        }
