# Rev 0.2.1 — generation counter on fetches
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from ..api.errors import ApiError, AuthRequiredError, ServerRejectedError
from .interaction_guard import InteractionGuard
from .page_config import PageConfig

log = logging.getLogger(__name__)

Snapshot = Dict[str, Any]


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    code: str                    # applied | invalid | busy | rejected | transport | auth_required
    message: Optional[str] = None


class PageViewModel(QObject):
    """
    Shared refresh/mutation plumbing for a page.

    Subclasses implement:
      _read() -> (snapshot, errors)   fetch page resources; failed resources are left out
      _apply(snapshot)                replace in-memory collections and emit
    Emits:
      - loadingChanged(bool)
      - errorChanged(str)            "" when cleared
      - notice(level: str, message: str)   level is "info" or "error"
      - authRequired()
    """

    loadingChanged = Signal(bool)
    errorChanged = Signal(str)
    notice = Signal(str, str)
    authRequired = Signal()

    def __init__(self, config: Optional[PageConfig] = None):
        super().__init__()
        self.config = config or PageConfig()
        self.guard = InteractionGuard()
        self.error: Optional[str] = None
        self._generation = 0

    # ---- interaction guard ----
    def is_user_interacting(self) -> bool:
        return self.guard.is_user_interacting()

    # ---- fetch gate ----
    async def fetch_data(self, force_refresh: bool = False) -> bool:
        """Returns True when fresh data was applied."""
        if not force_refresh and self.is_user_interacting():
            log.debug("%s: skipping background refresh, user is interacting", type(self).__name__)
            return False

        self._generation += 1
        generation = self._generation
        self.loadingChanged.emit(True)
        try:
            snapshot, errors = await self._read()
        finally:
            if generation == self._generation:
                self.loadingChanged.emit(False)

        if generation != self._generation:
            log.debug("%s: discarding superseded response #%d", type(self).__name__, generation)
            return False
        if not force_refresh and self.is_user_interacting():
            log.debug("%s: discarding background response, user started interacting", type(self).__name__)
            return False

        self._apply(snapshot)
        self._set_error("; ".join(errors) if errors else None)
        return True

    async def safe_refresh(self) -> bool:
        return await self.fetch_data(force_refresh=False)

    async def force_refresh(self) -> bool:
        return await self.fetch_data(force_refresh=True)

    async def _read(self) -> Tuple[Snapshot, List[str]]:
        raise NotImplementedError

    def _apply(self, snapshot: Snapshot) -> None:
        raise NotImplementedError

    # ---- mutations ----
    async def _run_mutation(
        self,
        action: Callable[[], Awaitable[Any]],
        *,
        failure_message: str,
        success_message: Optional[str] = None,
        on_success: Optional[Callable[[], None]] = None,
        refresh: bool = True,
    ) -> MutationResult:
        """
        Idle -> Submitting -> Idle. The in-flight flag is cleared whatever happens,
        so the guard always gets released.
        """
        if self.guard.mutation_in_flight:
            return MutationResult(False, "busy", "Another operation is still running")

        self.guard.mutation_started()
        try:
            try:
                await action()
            except AuthRequiredError as exc:
                log.warning("%s: %s", failure_message, exc.message)
                self.authRequired.emit()
                self.notice.emit("error", "Please log in again")
                return MutationResult(False, "auth_required", exc.message)
            except ServerRejectedError as exc:
                message = exc.message or failure_message
                log.warning("%s: %s", failure_message, message)
                self.notice.emit("error", f"{failure_message}: {message}")
                return MutationResult(False, "rejected", message)
            except ApiError as exc:
                log.error("%s: %s", failure_message, exc.message)
                self.notice.emit("error", failure_message)
                return MutationResult(False, "transport", exc.message)

            if on_success is not None:
                on_success()
            if refresh:
                await self.force_refresh()
            if success_message:
                self.notice.emit("info", success_message)
            return MutationResult(True, "applied")
        finally:
            self.guard.mutation_finished()

    def _invalid(self, problems: List[str]) -> MutationResult:
        message = "; ".join(problems)
        self.notice.emit("error", message)
        return MutationResult(False, "invalid", message)

    # ---- errors ----
    def _set_error(self, message: Optional[str]) -> None:
        if message == self.error:
            return
        self.error = message
        self.errorChanged.emit(message or "")

    def _read_failed(self, what: str, exc: BaseException, errors: List[str]) -> None:
        if isinstance(exc, AuthRequiredError):
            self.authRequired.emit()
        message = exc.message if isinstance(exc, ApiError) else str(exc)
        log.warning("Failed to load %s: %s", what, message)
        errors.append(f"Failed to load {what}")
