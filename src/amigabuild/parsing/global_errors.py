"""
Locates diagnostics that the tool reported without a line.

vasm reports a missing include as 'could not open <file.i> for input'
with no position; the include directive naming that file is searched in
the document so the error can be shown where it belongs.
"""
import re
from dataclasses import replace
from typing import List, Optional, Pattern, Sequence
from .diagnostics import CheckResult
from ..utils.document import TextDocument

RE_BRACKETED_NAME = re.compile(r".*<([^<>]+)>")


def include_pattern(file_name: str) -> Pattern[str]:
    return re.compile(r"^\s*include\s+\"" + re.escape(file_name), re.IGNORECASE)


def find_include_line(document: TextDocument, file_name: str) -> Optional[int]:
    """1-based line of the first include directive naming file_name."""
    pattern = include_pattern(file_name)
    for line in document.lines():
        if pattern.match(line.text):
            return line.line_number + 1
    return None


def resolve_global_errors(document: TextDocument, results: Sequence[CheckResult]) -> List[CheckResult]:
    resolved = []
    for result in results:
        if result.is_global:
            match = RE_BRACKETED_NAME.search(result.msg)
            if match:
                line = find_include_line(document, match.group(1))
                if line is not None:
                    result = replace(result, line=line)
        if not result.file:
            result = replace(result, file=document.file_name)
        resolved.append(result)
    return resolved
