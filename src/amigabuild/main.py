import sys
import os
import time
import argparse
from typing import List, Optional
from rich.console import Console
from rich.text import Text
from .compiler.errors import BuildError
from .diagnostics.store import DiagnosticStores
from .engine import BuildEngine
from .utils.lang import is_assembly_source

SEVERITY_STYLES = {"error": "bold red", "warning": "yellow"}


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(description="amigabuild: vasm/vlink diagnostics for m68k sources")
    parser.add_argument("file", nargs="?", help="Assembly source file to build")
    parser.add_argument("--workspace", default=None, help="Workspace root (defaults to the current directory)")
    parser.add_argument("--link", action="store_true", help="Build every workspace source and link them")
    parser.add_argument("--watch", action="store_true", help="Rebuild sources when they are saved")
    parser.add_argument("--debug", action="store_true", help="Add line debug information to the object")
    return parser


def render_diagnostics(stores: DiagnosticStores, console: Console):
    """Prints every marker as file:line:col: severity: message."""
    for collection in (stores.errors, stores.warnings):
        for file, markers in collection.items():
            for marker in markers:
                line = Text(f"{file}:{marker.line}:{marker.start_column + 1}: ")
                line.append(marker.severity.value, style=SEVERITY_STYLES.get(marker.severity.value, ""))
                line.append(f": {marker.msg}")
                console.print(line)


def run(argv: Optional[List[str]] = None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    console = Console()

    workspace = os.path.abspath(args.workspace or os.getcwd())
    if not os.path.isdir(workspace):
        print(f"Error: Workspace not found: {workspace}")
        sys.exit(1)

    if not args.file and not args.link and not args.watch:
        print("Error: No source file specified.")
        print("Usage: amigabuild <file.s> | --link | --watch")
        sys.exit(1)

    engine = BuildEngine(workspace)

    try:
        if args.file:
            abs_path = os.path.abspath(args.file)
            if not os.path.exists(abs_path):
                print(f"Error: File not found: {abs_path}")
                sys.exit(1)
            if not is_assembly_source(abs_path):
                print("Error: Unsupported file type. Use .s, .asm or .i")
                sys.exit(1)
            engine.build_file(abs_path, debug=args.debug)
        if args.link:
            engine.build_workspace()
    except BuildError as e:
        engine.notifier.show_error_message(str(e))
        render_diagnostics(engine.stores, console)
        sys.exit(1)

    render_diagnostics(engine.stores, console)

    if args.watch:
        engine.on_update_callback = lambda stores: render_diagnostics(stores, console)
        engine.start()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass
        finally:
            engine.stop()

    if engine.stores.has_errors:
        sys.exit(1)

if __name__ == "__main__":
    run()
