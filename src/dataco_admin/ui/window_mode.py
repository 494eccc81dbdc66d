# Rev 0.1.1

# ui/window_mode.py
import asyncio
import logging

from PySide6.QtCore import Qt, QRect
from PySide6.QtGui import QGuiApplication

log = logging.getLogger(__name__)


def lock_dialog_fixed(win, *, width_ratio=0.5, height_ratio=0.7):
    """
    For modal dialogs: keep them *not* maximized, but non-resizable and sized
    as a fraction of the current screen.
    """
    screen = QGuiApplication.screenAt(win.frameGeometry().center()) or QGuiApplication.primaryScreen()
    rect: QRect = screen.availableGeometry()
    w = int(rect.width() * width_ratio)
    h = int(rect.height() * height_ratio)
    win.setFixedSize(w, h)
    win.setWindowFlag(Qt.WindowMaximizeButtonHint, False)


def schedule(coro) -> asyncio.Future:
    """Run a VM coroutine from a Qt slot; failures land in the log instead of vanishing."""
    fut = asyncio.ensure_future(coro)

    def _done(f: asyncio.Future):
        if f.cancelled():
            return
        exc = f.exception()
        if exc is not None:
            log.error("Background operation failed", exc_info=(type(exc), exc, exc.__traceback__))

    fut.add_done_callback(_done)
    return fut


async def run_form(open_form, submit, *, release=None):
    """
    Show a form until its submission is applied or the user cancels.

    open_form(draft) shows the dialog and returns the edited value, or None on
    cancel. After a rejected or invalid submission the dialog comes back with
    the submitted value as the draft, so nothing the user typed is lost.
    submit(value) returns a MutationResult. release() runs once at the end.
    """
    draft = None
    try:
        while True:
            value = open_form(draft)
            if value is None:
                return None
            result = await submit(value)
            if result.ok or result.code == "auth_required":
                return result
            draft = value
    finally:
        if release is not None:
            release()
