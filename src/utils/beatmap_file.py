"""Read display metadata from .osu beatmap files"""
from pathlib import Path
from typing import Dict


def read_metadata(path: Path) -> Dict[str, str]:
    """Return the key/value pairs of the [Metadata] section."""
    metadata = {}
    in_section = False

    with open(path, 'r', encoding='utf-8-sig', errors='replace') as f:
        for raw in f:
            line = raw.strip()
            if line.startswith('[') and line.endswith(']'):
                if in_section:
                    break
                in_section = line == '[Metadata]'
                continue
            if in_section and ':' in line and not line.startswith('//'):
                key, value = line.split(':', 1)
                metadata[key.strip()] = value.strip()

    return metadata


def beatmap_display_name(path: Path) -> str:
    """'Artist - Title (Creator) [Version]', or the file stem if unreadable."""
    try:
        meta = read_metadata(path)
    except OSError:
        return Path(path).stem

    if not meta.get('Title'):
        return Path(path).stem

    return (
        f"{meta.get('Artist', 'unknown')} - {meta['Title']} "
        f"({meta.get('Creator', 'unknown')}) [{meta.get('Version', 'unknown')}]"
    )
