"""
Source detection — decides which files are assembly sources for vasm.
"""
from pathlib import Path

LANGUAGE_ID = "m68k"

SOURCE_EXTENSIONS = {".s", ".S", ".asm", ".ASM", ".i", ".I"}


def is_assembly_source(file_path: str) -> bool:
    """Return True if the file extension belongs to an m68k source."""
    return Path(file_path).suffix in SOURCE_EXTENSIONS


def object_file_name(file_path: str) -> str:
    """
    Object file name for a source: main.s -> main.o, noext -> noext.o.
    Only the last extension is replaced.
    """
    name = Path(file_path).name
    if name.find(".") > 0:
        return name[:name.rfind(".")] + ".o"
    return name + ".o"
