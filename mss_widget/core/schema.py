"""
Record types shared by the config resolver and the log stores.
"""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List


@dataclass
class ConfigKind:
    name: str
    file_name: str
    default: Dict[str, Any]


@dataclass
class Annotation:
    note: str = ""
    teacher: str = ""
    updatedAt: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary for storage."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Annotation':
        """Create from a stored entry, tolerating missing or non-string fields."""
        if not isinstance(data, dict):
            return cls()
        return cls(
            note=str(data.get("note") or ""),
            teacher=str(data.get("teacher") or ""),
            updatedAt=str(data.get("updatedAt") or ""),
        )


@dataclass
class LogPage:
    """One page of a CSV log: the file's own header plus merged rows."""
    header: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"header": list(self.header), "rows": list(self.rows), "total": self.total}
