"""Delivery of fetched asset bytes as local files."""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from src.services.storage.interface import Asset, AssetError


def default_asset_dir() -> Path:
    return Path(tempfile.gettempdir()) / "finance-tracker-assets"


def deliver_asset(
    data: bytes,
    record_name: str,
    field: str,
    directory: Optional[Union[str, Path]] = None,
) -> Asset:
    """
    Write fetched asset bytes to a fresh file and wrap it as an Asset.

    Every fetch gets its own file, so a reader never sees a later
    fetch overwrite the bytes it is reading.
    """
    target_dir = Path(directory) if directory else default_asset_dir()
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(
            prefix=f"{record_name}-{field}-",
            suffix=".asset",
            dir=target_dir,
        )
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
    except OSError as e:
        raise AssetError(f"Failed to deliver asset {field} of {record_name}: {e}")
    return Asset(file_path=Path(path))


def read_asset(asset: Asset, field: str) -> bytes:
    """Read a staged asset before it is written to a store."""
    try:
        return asset.read_bytes()
    except OSError as e:
        raise AssetError(f"Failed to read asset {field} from {asset.file_path}: {e}")
