from __future__ import annotations
import json
import logging
import time
from pathlib import Path as FSPath
from typing import Any, Dict, Optional, Union

from . import telemetry
from .telemetry import RunSnapshot

logger = logging.getLogger(__name__)


def total_time(snapshot: RunSnapshot) -> float:
    """Timestamp of the last sample of the last committed stroke, else 0."""
    strokes = snapshot.committed_strokes
    if not strokes or not strokes[-1]:
        return 0
    return strokes[-1][-1].timestamp


def build_export(snapshot: RunSnapshot) -> Dict[str, Any]:
    """Export document: difficulty, targets, per-stroke samples and total time."""
    return {
        "difficulty": snapshot.difficulty.value,
        "targets": [t.to_dict() for t in snapshot.targets],
        "trajectoryData": [
            [p.to_dict() for p in stroke] for stroke in snapshot.committed_strokes
        ],
        "totalTime": total_time(snapshot),
    }


def default_export_name() -> str:
    return f"trajectory-data-{int(time.time() * 1000)}.json"


def save_export(
    snapshot: RunSnapshot, outfile: Optional[Union[str, FSPath]] = None
) -> FSPath:
    """Write the export document as indented JSON and notify the export callback."""
    path = FSPath(outfile) if outfile is not None else FSPath(default_export_name())
    document = build_export(snapshot)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    logger.info(
        "Saved %d strokes to %s", len(document["trajectoryData"]), path
    )

    cb = telemetry.get_export_callback()
    if cb is not None:
        try:
            cb(path)
        except Exception:
            logger.debug("Export callback failed for %s", path, exc_info=True)
    return path


def load_export(path: Union[str, FSPath]) -> Dict[str, Any]:
    """Read an export document back, checking its top-level shape."""
    document = json.loads(FSPath(path).read_text(encoding="utf-8"))
    missing = {"difficulty", "targets", "trajectoryData", "totalTime"} - set(document)
    if missing:
        raise ValueError(
            f"{path} is not a trajectory export (missing {', '.join(sorted(missing))})"
        )
    return document
