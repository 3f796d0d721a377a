from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


class Category(str, Enum):
    TAB = "tab"
    BAD_UTF8 = "bad_utf8"
    CONTROL = "control"
    CRLF = "crlf"
    CR = "cr"
    MISSING_EOL = "missing_eol"


MESSAGES: Dict[Category, str] = {
    Category.TAB: "Tab character",
    Category.BAD_UTF8: "Bad multibyte sequence",
    Category.CONTROL: "Unexpected control character",
    Category.CRLF: "Windows newline sequence (CR,LF)",
    Category.CR: "Old-time MacOS newline sequence (CR)",
    Category.MISSING_EOL: "Missing EOL at end of file",
}

# Categories with a per-file occurrence counter (missing EOL happens at most once)
COUNTED_CATEGORIES: List[Category] = [
    Category.TAB,
    Category.CRLF,
    Category.CR,
    Category.CONTROL,
    Category.BAD_UTF8,
]


@dataclass(frozen=True)
class Incident:
    category: Category
    path: str
    line: int  # 1-based
    message: str

    def format(self) -> str:
        return f"{self.path}({self.line}) [ERROR] :{self.message}"


class IncidentOut(BaseModel):
    category: Category
    line: int
    message: str


class FileReport(BaseModel):
    path: str
    ok: bool = Field(description="False only when the file could not be read")
    clean: bool = Field(
        description="True when the file was read and no content violation was found"
    )
    counts: Dict[str, int] = Field(default_factory=dict)
    line_count: int = 0
    missing_eol: bool = False
    incidents: List[IncidentOut] = Field(default_factory=list)
    error: str | None = None
