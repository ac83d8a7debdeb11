"""Strongly typed identifiers for Whisper domain entities."""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
