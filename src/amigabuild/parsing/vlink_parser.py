"""
vlink output parser.

vlink interleaves its diagnostics with progress noise, and a message may be
continued on the following indented lines. The parser keeps the message it
is currently building and flushes it when anything else shows up.
"""
import re
from dataclasses import replace
from typing import List, Optional
from .diagnostics import CheckResult

# Pattern: warning 5 in line 2 of "myfile": oh no
RE_LOCATED = re.compile(r"^\s*(error|warning)\s(\d+)\sin\sline\s(\d+)\sof\s\"(.+)\":\s*(.*)$")
# Pattern: error 3 : This is not good
RE_UNLOCATED = re.compile(r"^\s*(error|warning)\s(\d+)\s*:\s*(.*)$")
RE_CONTINUATION = re.compile(r"^\s+\S")


class VLINKParser:
    def __init__(self):
        self._results: List[CheckResult] = []
        self._pending: Optional[CheckResult] = None

    def parse(self, text: str) -> List[CheckResult]:
        self._results = []
        self._pending = None
        for line in text.split("\n"):
            self._feed(line.rstrip("\r"))
        self._flush()
        return self._results

    def _feed(self, line: str):
        match = RE_LOCATED.match(line)
        if match:
            self._flush()
            kind, code, line_num, filename, rest = match.groups()
            self._pending = CheckResult(
                file=filename,
                line=int(line_num),
                msg=f"{kind} {code}: {rest}",
                severity=kind,
            )
            return

        match = RE_UNLOCATED.match(line)
        if match:
            self._flush()
            self._pending = CheckResult(file="", line=0, msg=line, severity=match.group(1))
            return

        if self._pending is not None and RE_CONTINUATION.match(line):
            self._pending = replace(self._pending, msg=f"{self._pending.msg} {line.strip()}")
            return

        # Blank lines and noise end the current message but never the scan
        self._flush()

    def _flush(self):
        if self._pending is not None:
            self._results.append(self._pending)
            self._pending = None
