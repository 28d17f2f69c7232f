"""SteamCMD batch script generation for Steam-depot updates."""

import re

from gorilla_archive.core.exceptions import ValidationError
from gorilla_archive.models.catalog import DownloadType, Update

SCRIPT_MEDIA_TYPE = "text/plain"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


def script_filename(update: Update) -> str:
    """Filename for an update's script, e.g. ``GorillaTag_Summer_Splash.bat``."""
    return f"GorillaTag_{_UNSAFE_FILENAME_CHARS.sub('_', update.name)}.bat"


def generate_batch_script(update: Update, app_id: str, depot_id: str) -> str:
    """Build a Windows batch script that downloads the update's depot manifest.

    Args:
        update: A Steam-depot update.
        app_id: Steam application ID.
        depot_id: Steam depot ID.

    Returns:
        str: Script text.

    Raises:
        ValidationError: If the update is not a Steam-depot update or has
            no manifest ID.
    """
    if update.download_type != DownloadType.STEAM_DEPOT.value:
        raise ValidationError(
            f"Update '{update.id}' is not a Steam depot download",
            details={"download_type": update.download_type},
        )
    if not update.manifest_id:
        raise ValidationError(f"Update '{update.id}' has no manifest ID")

    lines = [
        "@echo off",
        "echo.",
        f"echo   Gorilla Tag Downloader - {update.label}",
        "echo.",
        f"steamcmd +login anonymous +download_depot {app_id} {depot_id} {update.manifest_id} +quit",
        "echo.",
        f"echo   Done! Files in: steamapps\\content\\app_{app_id}\\depot_{depot_id}\\",
        "pause",
    ]
    return "\n".join(lines)
