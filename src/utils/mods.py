"""Legacy mod bitmask decoding"""
from typing import List

# Legacy bit -> acronym, in display order
LEGACY_MODS = [
    (1 << 0, "NF"),
    (1 << 1, "EZ"),
    (1 << 2, "TD"),
    (1 << 3, "HD"),
    (1 << 4, "HR"),
    (1 << 5, "SD"),
    (1 << 6, "DT"),
    (1 << 7, "RX"),
    (1 << 8, "HT"),
    (1 << 9, "NC"),
    (1 << 10, "FL"),
    (1 << 11, "AT"),
    (1 << 12, "SO"),
    (1 << 13, "AP"),
    (1 << 14, "PF"),
    (1 << 15, "4K"),
    (1 << 16, "5K"),
    (1 << 17, "6K"),
    (1 << 18, "7K"),
    (1 << 19, "8K"),
    (1 << 20, "FI"),
    (1 << 21, "RD"),
    (1 << 22, "CN"),
    (1 << 23, "TP"),
    (1 << 24, "9K"),
    (1 << 25, "CO"),
    (1 << 26, "1K"),
    (1 << 27, "3K"),
    (1 << 28, "2K"),
    (1 << 29, "SV2"),
    (1 << 30, "MR"),
]

# A legacy score carries both bits for these; only the stronger mod is shown
_IMPLIED_BY = {
    "DT": "NC",
    "SD": "PF",
}


def decode_legacy_mods(enabled_mods: int) -> List[str]:
    """
    Convert the API's enabled_mods bitmask to mod acronyms.

    Example:
        >>> decode_legacy_mods(72)
        ['HD', 'DT']
        >>> decode_legacy_mods(576)
        ['NC']
    """
    if enabled_mods < 0:
        raise ValueError(f"Invalid mod bitmask: {enabled_mods}")

    acronyms = [acronym for bit, acronym in LEGACY_MODS if enabled_mods & bit]
    return [a for a in acronyms if _IMPLIED_BY.get(a) not in acronyms]


def format_mods(mods: List[str]) -> str:
    """'HD, DT' style label, 'None' when no mods are enabled."""
    return ", ".join(mods) if mods else "None"
