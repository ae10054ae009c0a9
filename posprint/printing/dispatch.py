from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
from pathlib import Path
import subprocess

from ..errors import PrintError

logger = logging.getLogger(__name__)

# one worker keeps jobs reaching the spooler in submission order
_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="print-dispatch")


def print_pdf_silently(pdf_path: Path, printer_name: str, sumatra_location: str) -> None:
    """Send a saved PDF to `printer_name` through the SumatraPDF command line."""
    try:
        abs_path = Path(pdf_path).resolve(strict=True)
    except OSError as exc:
        raise PrintError(f"Failed to resolve PDF path: {exc}") from exc

    cmd = [
        str(sumatra_location),
        "-print-to",
        printer_name,
        "-silent",
        "-exit-when-done",
        "-print-settings",
        "noscale",
        str(abs_path),
    ]
    try:
        result = subprocess.run(cmd, check=False, capture_output=True)
    except OSError as exc:
        raise PrintError(f"Failed to launch Sumatra: {exc}") from exc
    if result.returncode != 0:
        raise PrintError(f"Sumatra exited with {result.returncode}")


def _log_outcome(pdf_path: Path, printer_name: str, future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Print failed for %s on %s: %s", pdf_path, printer_name, exc)
    else:
        logger.info("Sent %s to %s", pdf_path, printer_name)


def dispatch_print(pdf_path: Path, printer_name: str, sumatra_location: str) -> Future:
    """
    Queue a print job and return immediately. Failures are logged from the worker
    and never reach the caller that produced the document.
    """
    future = _executor.submit(print_pdf_silently, pdf_path, printer_name, sumatra_location)
    future.add_done_callback(lambda f: _log_outcome(pdf_path, printer_name, f))
    return future
