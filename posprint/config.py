from __future__ import annotations

from pathlib import Path
import os


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
DB_PATH = OUT_DIR / "reports.db"

# A4 portrait, millimetres
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0

# A single report never legitimately needs more pages than this.
MAX_PAGES = 2000

CLUB_NAME = os.getenv("CLUB_NAME", "")
PRINTER_NAME = os.getenv("POS_PRINTER", "")
SUMATRA_LOCATION = os.getenv(
    "SUMATRA_LOCATION",
    r"C:\Program Files\SumatraPDF\SumatraPDF.exe",
)

LOG_FORMAT = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "reports.db"
