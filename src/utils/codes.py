"""RFID-equivalent ticket code generation."""

import secrets

RFID_BYTES = 4


def generate_rfid() -> str:
    """Return a fixed-length code such as ``"3F A0 9C 11"``."""
    raw = secrets.token_hex(RFID_BYTES).upper()
    return " ".join(raw[i : i + 2] for i in range(0, len(raw), 2))


def normalize_rfid(value: str) -> str:
    """Accept scanner input with or without separators and in any case."""
    compact = "".join(value.split()).upper()
    return " ".join(compact[i : i + 2] for i in range(0, len(compact), 2))
