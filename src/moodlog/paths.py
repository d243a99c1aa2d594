from __future__ import annotations

import os
from pathlib import Path
from typing import NamedTuple

DATA_ENV = "MOODLOG_DATA"
CONFIG_DIR = Path("~/.config/moodlog")


class DataPath(NamedTuple):
    path: Path
    reason: str


def resolve_data_path(data_arg: str | None, profile: str | None) -> DataPath:
    """
    Pick the journal file, first match wins:
    --data, then $MOODLOG_DATA, then ~/.config/moodlog/<profile or "data">.json
    """
    if data_arg:
        raw, reason = data_arg, "because you passed --data"
    elif os.environ.get(DATA_ENV):
        raw, reason = os.environ[DATA_ENV], f"because {DATA_ENV} is set"
    elif profile:
        raw, reason = str(CONFIG_DIR / f"{profile}.json"), f"because you used --profile {profile!r}"
    else:
        raw, reason = str(CONFIG_DIR / "data.json"), "default XDG config location"
    return DataPath(Path(raw).expanduser().resolve(), reason)
