# Rev 0.2.0

# src/dataco_admin/main.py  (Rev 0.2.0)
import argparse
import sys

from PySide6 import QtAsyncio
from PySide6.QtCore import QCoreApplication, Qt
from PySide6.QtGui import QFont, QGuiApplication
from PySide6.QtWidgets import QApplication

from .app_context import AppContext
from .ui.main_window import MainWindow
from .utils.config import load_settings
from .utils.logging_setup import setup_logging


def _parse_args(argv):
    ap = argparse.ArgumentParser(prog="dataco-admin", description="DATACO task administration")
    ap.add_argument("--api-url", help="Base URL of the admin API (overrides settings/DATACO_API_URL)")
    ap.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    return ap.parse_known_args(argv)[0]


def main(argv=None):
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    app = QApplication(sys.argv)

    QGuiApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    QCoreApplication.setOrganizationName("dataco")
    QCoreApplication.setApplicationName("dataco-admin")

    logfile = setup_logging(debug=args.debug)
    print(f"[logging] Writing to: {logfile}")

    settings = load_settings()
    if args.api_url:
        settings["api"]["base_url"] = args.api_url

    # --- DI wiring ---
    ctx = AppContext.create(settings)

    # --- UI ---
    win = MainWindow(ctx, logfile=logfile)
    win.show()
    app.setProperty("mainWindow", win)
    app.setFont(QFont("Sans Serif", 10))

    # Qt event loop doubles as the asyncio loop so VM coroutines run from slots
    QtAsyncio.run(win.start(), keep_running=True, quit_qapp=True, handle_sigint=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
