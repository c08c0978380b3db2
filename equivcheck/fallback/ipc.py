"""
IPC envelope between the fallback runner and its child process.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EngineReply:
	"""Structured result for one fallback strategy run in a child process."""
	ok: bool
	message: str
	verdict: Optional[bool] = None
	detail: Optional[str] = None
