# scrubkit/utils.py
from pathlib import Path

import appdirs

APP_NAME = "ScrubKit"


def user_data_dir(app_name: str = APP_NAME) -> Path:
    p = Path(appdirs.user_data_dir(app_name))
    p.mkdir(parents=True, exist_ok=True)
    return p


def default_reports_dir() -> Path:
    return user_data_dir() / "reports"


def cleaned_path_for(path: Path) -> Path:
    """photo.jpg -> photo.clean.jpg, next to the original."""
    suffix = path.suffix or ".bin"
    return path.with_name(f"{path.stem}.clean{suffix}")


def is_cleaned_output(path: Path) -> bool:
    return path.stem.endswith(".clean")
