"""D-Bus service for GUI communication.

D-Bus methods use PascalCase per D-Bus convention, and type signatures
like "as" and "(s)" are D-Bus protocol types, not Python syntax. Payloads
are JSON strings using the ``to_dict`` shapes of the result models.

Scans and cleans run on a worker thread so the bus stays responsive to
``CancelScan``; their results arrive as ``ScanFinished`` and
``CleanFinished`` signals.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import threading
from pathlib import Path
from typing import Callable

from dbus_next import BusType
from dbus_next.aio import MessageBus
from dbus_next.service import ServiceInterface, method, signal

from devjunk.core.engine import DevJunkEngine
from devjunk.core.errors import DevJunkError
from devjunk.core.progress import ThrottledCallback
from devjunk.models.scan_options import ScanOptions
from devjunk.models.scan_result import ScanProgress

log = logging.getLogger(__name__)

_BUS_NAME = "io.github.devjunk"
_OBJECT_PATH = "/io/github/devjunk"
_INTERFACE = "io.github.devjunk.Manager"

# Minimum spacing between ScanProgress signals (seconds).
_PROGRESS_INTERVAL = 0.05


# noinspection PyPep8Naming
class DevJunkDBusService(ServiceInterface):
    """D-Bus service interface for devjunk."""

    def __init__(self, loop: asyncio.AbstractEventLoop, engine: DevJunkEngine | None = None) -> None:
        super().__init__(_INTERFACE)
        self._loop = loop
        self._engine = engine or DevJunkEngine()
        self._scan_cancel = threading.Event()
        self._clean_cancel = threading.Event()
        self._busy = threading.Lock()

    @method()
    def ListJunkKinds(self) -> "s":  # type: ignore[override]
        """List all supported junk kinds as JSON."""
        return json.dumps([k.to_dict() for k in self._engine.list_junk_kinds()])

    @method()
    def ValidatePath(self, path: "s") -> "s":  # type: ignore[override]
        """Check that a path can be used as a scan root."""
        if not os.path.exists(path):
            return json.dumps({"valid": False, "error": f"Path does not exist: {path}"})
        if not os.path.isdir(path):
            return json.dumps({"valid": False, "error": f"Path is not a directory: {path}"})
        return json.dumps({"valid": True})

    @method()
    def Scan(self, paths: "as", max_depth: "i", include_hidden: "b", excludes: "as") -> "s":  # type: ignore[override]
        """Start scanning paths. A negative *max_depth* means unlimited.

        Emits throttled ScanProgress signals, then ScanFinished with the
        result (or ``{"error": ...}``).
        """
        options = ScanOptions(
            max_depth=max_depth if max_depth >= 0 else None,
            include_hidden=include_hidden,
            exclude_paths=tuple(excludes),
        )
        cancel = threading.Event()

        def emit(progress: ScanProgress) -> None:
            self._emit(self.ScanProgress, json.dumps(progress.to_dict()))

        throttled = ThrottledCallback(emit, interval=_PROGRESS_INTERVAL)

        def run() -> str:
            try:
                result = self._engine.scan(list(paths), options, on_progress=throttled, cancel=cancel)
            except DevJunkError as e:
                log.warning("Scan failed: %s", e)
                return json.dumps({"error": str(e)})
            throttled.flush()
            return json.dumps(result.to_dict())

        if not self._start(run, self.ScanFinished):
            return json.dumps({"started": False, "error": "Another operation is running"})
        self._scan_cancel = cancel
        return json.dumps({"started": True})

    @method()
    def CancelScan(self):  # type: ignore[override]
        """Abandon the scan in progress, if any."""
        self._scan_cancel.set()

    @method()
    def CancelClean(self):  # type: ignore[override]
        """Stop starting new deletions. Paths already deleted stay deleted."""
        self._clean_cancel.set()

    @method()
    def Clean(self, paths: "as", sizes: "s", dry_run: "b") -> "s":  # type: ignore[override]
        """Start deleting paths. The result arrives as CleanFinished.

        *sizes* is a JSON object mapping paths to byte counts; pass ``""``
        to use the sizes from the last scan.
        """
        try:
            size_map = {Path(p): int(s) for p, s in json.loads(sizes).items()} if sizes else None
        except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
            return json.dumps({"started": False, "error": f"Bad sizes: {e}"})

        cancel = threading.Event()

        def run() -> str:
            result = self._engine.clean(list(paths), dry_run, sizes=size_map, cancel=cancel)
            return json.dumps(result.to_dict())

        if not self._start(run, self.CleanFinished):
            return json.dumps({"started": False, "error": "Another operation is running"})
        self._clean_cancel = cancel
        return json.dumps({"started": True})

    @signal()
    def ScanProgress(self, payload: str) -> "s":  # type: ignore[override]
        return payload

    @signal()
    def ScanFinished(self, payload: str) -> "s":  # type: ignore[override]
        return payload

    @signal()
    def CleanFinished(self, payload: str) -> "s":  # type: ignore[override]
        return payload

    def _emit(self, sig: Callable[[str], object], payload: str) -> None:
        """Emit a signal from any thread."""
        self._loop.call_soon_threadsafe(sig, payload)

    def _start(self, work: Callable[[], str], finished: Callable[[str], object]) -> bool:
        """Run *work* on a worker thread, one operation at a time."""
        if not self._busy.acquire(blocking=False):
            return False

        def run() -> None:
            try:
                payload = work()
            except Exception as e:
                log.exception("Background operation failed")
                payload = json.dumps({"error": str(e)})
            finally:
                self._busy.release()
            self._emit(finished, payload)

        threading.Thread(target=run, name="devjunk-dbus", daemon=True).start()
        return True


async def run_service() -> None:
    """Start the D-Bus service."""
    bus = await MessageBus(bus_type=BusType.SESSION).connect()
    service = DevJunkDBusService(asyncio.get_running_loop())
    bus.export(_OBJECT_PATH, service)
    await bus.request_name(_BUS_NAME)
    log.info("D-Bus service started on %s", _BUS_NAME)
    await bus.wait_for_disconnect()


def start_service() -> None:
    """Entry point to start the D-Bus service."""
    asyncio.run(run_service())
