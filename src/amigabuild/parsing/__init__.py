from .diagnostics import CheckResult, OutputParser, Severity
from .vasm_parser import VASMParser
from .vlink_parser import VLINKParser
from .global_errors import resolve_global_errors
