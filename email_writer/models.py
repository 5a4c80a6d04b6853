"""
Data structures (dataclasses) for the email writer.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ToneOption:
    """A selectable email tone and the catalog keys for its label."""
    value: str
    label_key: str
    description_key: str


@dataclass(frozen=True)
class EmailRequest:
    """Validated form input for a single generation."""
    thoughts: str
    tone: str
    context: Optional[str] = None  # email being replied to
