"""
Minimal text document model, standing in for the editor host's documents.
Only what range derivation and include searches need: ordered lines with
their text and end offset.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List


def canonical_path(file_path: str) -> str:
    """Single identity for a file, whatever spelling the tool used."""
    return os.path.normcase(os.path.abspath(file_path))


@dataclass(frozen=True)
class TextLine:
    line_number: int  # 0-based
    text: str

    @property
    def end(self) -> int:
        return len(self.text)


class TextDocument:
    def __init__(self, file_name: str, text: str = ""):
        self.file_name = os.path.abspath(file_name)
        # Only \n ends a line for the assembler, form feeds included in the text
        lines = [line.rstrip("\r") for line in text.split("\n")]
        if len(lines) > 1 and lines[-1] == "":
            lines.pop()
        self._lines: List[str] = lines

    @classmethod
    def open(cls, file_name: str) -> "TextDocument":
        content = Path(file_name).read_text(encoding="utf-8", errors="replace")
        return cls(file_name, content)

    @property
    def uri(self) -> str:
        return canonical_path(self.file_name)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, index: int) -> TextLine:
        if index < 0 or index >= len(self._lines):
            raise IndexError(f"Line {index} out of range for {self.file_name}")
        return TextLine(index, self._lines[index])

    def lines(self) -> Iterator[TextLine]:
        for index, text in enumerate(self._lines):
            yield TextLine(index, text)
