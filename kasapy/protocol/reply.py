"""Decoded replies and ad-hoc field extraction."""

from dataclasses import dataclass

from kasapy.constants import ALIAS_MARKER, MODEL_MARKER


@dataclass
class Reply:
    data: bytes
    address: tuple[str, int]
    received_at: float

    @property
    def ip(self) -> str:
        return self.address[0]

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


def extract_field(text: str, marker: str) -> str | None:
    """Return the text between the first *marker* and the next double quote.

    Replies are searched, not parsed: some firmware sends JSON that does not
    survive a strict parser. Returns None if the marker or the closing quote
    is missing.
    """
    start = text.find(marker)
    if start < 0:
        return None
    start += len(marker)
    end = text.find('"', start)
    if end < 0:
        return None
    return text[start:end]


def extract_sysinfo_fields(text: str) -> tuple[str, str] | None:
    """(alias, model) from a get_sysinfo reply, or None if either is absent."""
    alias = extract_field(text, ALIAS_MARKER)
    model = extract_field(text, MODEL_MARKER)
    if alias is None or model is None:
        return None
    return alias, model
