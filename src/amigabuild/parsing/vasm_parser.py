import re
from typing import List
from .diagnostics import CheckResult

# Pattern: error 2 in line 3 of "main.s": unknown mnemonic <mvoe>
RE_LOCATED = re.compile(r"(error|warning|message)\s(\d+)\sin\sline\s(\d+)\sof\s\"(.+)\":\s*(.*)")
# Pattern: fatal error 13 : could not open <hw.i> for input
RE_GLOBAL_ERROR = re.compile(r".*error\s(\d+)\s*:\s*(.*)")


class VASMParser:
    """
    Parses vasm output, one message per line.
    Echoed source lines (starting with '>') are skipped.
    """

    def parse(self, text: str) -> List[CheckResult]:
        results = []
        for line in text.split("\n"):
            line = line.rstrip("\r")
            if len(line) <= 1 or line.startswith(">"):
                continue
            match = RE_LOCATED.search(line)
            if match:
                kind, code, line_num, filename, rest = match.groups()
                results.append(CheckResult(
                    file=filename,
                    line=int(line_num),
                    msg=f"{kind} {code}: {rest}",
                    severity=kind,
                ))
            elif RE_GLOBAL_ERROR.search(line):
                results.append(CheckResult(file="", line=0, msg=line, severity="error"))
        return results
