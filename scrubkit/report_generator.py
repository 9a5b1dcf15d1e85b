# scrubkit/report_generator.py
import base64
import dataclasses
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _json_default(obj):
    """Fallback for values json cannot encode on its own."""
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(obj).decode("ascii")
    if isinstance(obj, Path):
        return str(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class ReportGenerator:
    def __init__(self, reports_folder):
        self.reports_folder = Path(reports_folder)

    def generate_json_report(self, name, payload):
        self.reports_folder.mkdir(parents=True, exist_ok=True)
        path = self.reports_folder / f"report_{name}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, default=_json_default)
        logger.info("Report generated: %s", path)
        return str(path)
