"""
preset_engine.report - Structured result of a preset import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ImportResult:
    success: bool = False
    missing_types: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    messages: list[dict] = field(default_factory=list)   # [{level, message}]

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "missing_types": self.missing_types,
            "created": self.created,
            "updated": self.updated,
            "deleted": self.deleted,
            "messages": self.messages,
        }
