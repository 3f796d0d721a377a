"""
Byte-level source convention checker.

A single-pass state machine walks the raw bytes of a file and classifies each
one against the current parsing state: beginning of line, normal text, after
a CR, or inside a UTF-8 multibyte sequence. Every violation is counted, but
only the first occurrence of each category is reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import click

from .config import settings
from .schema import (
    COUNTED_CATEGORIES,
    MESSAGES,
    Category,
    FileReport,
    Incident,
    IncidentOut,
)

logger = logging.getLogger(__name__)

TAB = 0x09
LF = 0x0A
CR = 0x0D


def is_continuation_byte(b: int) -> bool:
    # 10xx xxxx
    return (b & 0xC0) == 0x80


def is_lead_byte1(b: int) -> bool:
    # 110x xxxx
    return (b & 0xE0) == 0xC0


def is_lead_byte2(b: int) -> bool:
    # 1110 xxxx
    return (b & 0xF0) == 0xE0


def is_lead_byte3(b: int) -> bool:
    # 1111 0xxx
    return (b & 0xF8) == 0xF0


def is_control_byte(b: int) -> bool:
    """C0 control character other than TAB, LF and CR."""
    return b < 0x20 and b not in (TAB, LF, CR)


class State(Enum):
    NORMAL = "normal"
    BEGIN_OF_LINE = "begin_of_line"
    AFTER_CR = "after_cr"
    EXPECT_3_TRAILERS = "expect_3_trailers"
    EXPECT_2_TRAILERS = "expect_2_trailers"
    EXPECT_1_TRAILER = "expect_1_trailer"


@dataclass
class ScanResult:
    path: str
    ok: bool
    counts: Dict[Category, int] = field(
        default_factory=lambda: {c: 0 for c in COUNTED_CATEGORIES}
    )
    incidents: List[Incident] = field(default_factory=list)
    line_count: int = 0
    missing_eol: bool = False
    error: Optional[str] = None

    @property
    def clean(self) -> bool:
        return self.ok and not self.missing_eol and not any(self.counts.values())

    def to_report(self) -> FileReport:
        return FileReport(
            path=self.path,
            ok=self.ok,
            clean=self.clean,
            counts={c.value: n for c, n in self.counts.items()},
            line_count=self.line_count,
            missing_eol=self.missing_eol,
            incidents=[
                IncidentOut(category=i.category, line=i.line, message=i.message)
                for i in self.incidents
            ],
            error=self.error,
        )


class LineScanner:
    """
    Incremental scanner for one byte stream.

    Feed the stream in chunks of any size with feed(), then call finish().
    Chunk boundaries may fall anywhere, including inside a CR/LF pair or a
    multibyte sequence.
    """

    def __init__(
        self,
        path: str = "<bytes>",
        on_incident: Optional[Callable[[Incident], None]] = None,
    ):
        self.path = path
        self.state = State.BEGIN_OF_LINE
        self.line_count = 0
        self.counts: Dict[Category, int] = {c: 0 for c in COUNTED_CATEGORIES}
        self.incidents: List[Incident] = []
        self._on_incident = on_incident
        self._finished = False

    def _incident(self, category: Category) -> None:
        self.counts[category] += 1
        if self.counts[category] == 1:
            self._report(category)

    def _report(self, category: Category) -> None:
        inc = Incident(
            category=category,
            path=self.path,
            line=self.line_count + 1,
            message=MESSAGES[category],
        )
        self.incidents.append(inc)
        if self._on_incident is not None:
            self._on_incident(inc)

    def _step(self, c: int) -> None:
        while True:
            state = self.state
            if state is State.BEGIN_OF_LINE:
                state = self.state = State.NORMAL

            if state is State.NORMAL:
                if c == LF:
                    self.line_count += 1
                    self.state = State.BEGIN_OF_LINE
                elif c == CR:
                    self.state = State.AFTER_CR
                elif c == TAB:
                    self._incident(Category.TAB)
                elif is_lead_byte3(c):
                    self.state = State.EXPECT_3_TRAILERS
                elif is_lead_byte2(c):
                    self.state = State.EXPECT_2_TRAILERS
                elif is_lead_byte1(c):
                    self.state = State.EXPECT_1_TRAILER
                elif is_continuation_byte(c):
                    self._incident(Category.BAD_UTF8)
                elif is_control_byte(c):
                    self._incident(Category.CONTROL)
                return

            if state is State.AFTER_CR:
                if c == LF:
                    self._incident(Category.CRLF)
                    self.line_count += 1
                    self.state = State.BEGIN_OF_LINE
                    return
                self._incident(Category.CR)
                self.line_count += 1
                self.state = State.BEGIN_OF_LINE
                # c has not been consumed yet: classify it again
                continue

            # inside a multibyte sequence
            if not is_continuation_byte(c):
                self._incident(Category.BAD_UTF8)
                self.state = State.NORMAL
            elif state is State.EXPECT_3_TRAILERS:
                self.state = State.EXPECT_2_TRAILERS
            elif state is State.EXPECT_2_TRAILERS:
                self.state = State.EXPECT_1_TRAILER
            else:
                self.state = State.NORMAL
            return

    def feed(self, data: bytes) -> None:
        if self._finished:
            raise RuntimeError("scanner already finished")
        for c in data:
            self._step(c)

    def finish(self) -> ScanResult:
        if self._finished:
            raise RuntimeError("scanner already finished")
        self._finished = True
        missing_eol = self.state is not State.BEGIN_OF_LINE
        if missing_eol:
            self._report(Category.MISSING_EOL)
        return ScanResult(
            path=self.path,
            ok=True,
            counts=dict(self.counts),
            incidents=list(self.incidents),
            line_count=self.line_count,
            missing_eol=missing_eol,
        )


def scan_bytes(
    data: bytes,
    path: str = "<bytes>",
    on_incident: Optional[Callable[[Incident], None]] = None,
) -> ScanResult:
    """Scan an in-memory buffer."""
    scanner = LineScanner(path, on_incident=on_incident)
    scanner.feed(data)
    return scanner.finish()


def _print_incident(inc: Incident) -> None:
    click.echo(inc.format())


def check_file(
    path: str | Path,
    echo: bool = True,
    chunk_size: Optional[int] = None,
) -> ScanResult:
    """
    Scan one file on disk.

    Prints "Checking <path>" and each first-occurrence incident when echo is
    on. An OSError while opening or reading aborts the scan: the system error
    is written to stderr and the result has ok=False. Content violations
    never change ok.
    """
    name = str(path)
    size = chunk_size or settings.CHUNK_SIZE
    if echo:
        click.echo(f"Checking {name}")

    scanner = LineScanner(name, on_incident=_print_incident if echo else None)
    try:
        with open(path, "rb") as fh:
            while True:
                chunk = fh.read(size)
                if not chunk:
                    break
                scanner.feed(chunk)
    except OSError as e:
        reason = e.strerror or str(e)
        click.echo(f"{name}: {reason}", err=True)
        logger.warning(f"Scan of {name} aborted: {reason}")
        return ScanResult(
            path=name,
            ok=False,
            counts=dict(scanner.counts),
            incidents=list(scanner.incidents),
            line_count=scanner.line_count,
            error=reason,
        )

    result = scanner.finish()
    counts = {c.value: n for c, n in result.counts.items()}
    logger.debug(
        f"{name}: {result.line_count} lines, counts={counts}, "
        f"missing_eol={result.missing_eol}"
    )
    return result


def check_paths(
    paths: Iterable[str | Path],
    echo: bool = True,
    chunk_size: Optional[int] = None,
) -> List[ScanResult]:
    """Scan each path in order, each with fresh state."""
    return [check_file(p, echo=echo, chunk_size=chunk_size) for p in paths]
