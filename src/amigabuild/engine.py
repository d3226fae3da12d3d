import asyncio
import os
import threading
from typing import Callable, List, Optional
from rich.console import Console
from .compiler.errors import BuildError
from .compiler.executor import Executor
from .compiler.vasm import VASMCompiler
from .compiler.vlink import VLINKLinker
from .diagnostics.reconciler import DiagnosticReconciler
from .diagnostics.store import DiagnosticStores
from .parsing.diagnostics import CheckResult
from .utils.config import ConfigManager
from .utils.document import TextDocument
from .utils.output import Notifier, OutputChannel
from .utils.watcher import FileWatcher


class BuildEngine:
    """
    Owns the session singletons (stores, output channel) and runs builds
    for the command line and the save watcher.
    """
    def __init__(self, workspace_root: str, config: Optional[ConfigManager] = None,
                 console: Optional[Console] = None):
        self.workspace_root = os.path.abspath(workspace_root)
        self.config = config if config else ConfigManager()
        self.output_channel = OutputChannel(console=console, log_file=self.config.get("log_file"))
        self.notifier = Notifier(console)
        self.stores = DiagnosticStores()
        self.executor = Executor(self.output_channel)
        self.reconciler = DiagnosticReconciler(self.stores, self.notifier)
        self.linker = VLINKLinker(self.config, self.executor)
        self.compiler = VASMCompiler(
            self.config, self.executor, self.reconciler, self.workspace_root, self.linker, self.notifier
        )
        self.watcher = FileWatcher()
        self.on_update_callback: Optional[Callable[[DiagnosticStores], None]] = None
        # Saves can arrive while a build is running
        self._build_lock = threading.Lock()

    def build_file(self, file_path: str, debug: bool = False) -> List[CheckResult]:
        self.compiler.ensure_enabled()
        document = TextDocument.open(file_path)
        with self._build_lock:
            results = asyncio.run(self.compiler.build_document(document, debug=debug))
        self._updated()
        return results

    def build_workspace(self) -> List[CheckResult]:
        with self._build_lock:
            try:
                results = asyncio.run(self.compiler.build_workspace())
            finally:
                self._updated()
        self.notifier.show_information_message("Build succeeded")
        return results

    def start(self):
        self.watcher.start_watching(
            self.workspace_root, self._on_file_saved, ignore_dir=str(self.compiler.get_build_dir())
        )

    def stop(self):
        self.watcher.stop_watching()

    def _on_file_saved(self, path: str):
        self.output_channel.log(f"Saved {path}, rebuilding")
        try:
            self.build_file(path)
        except (BuildError, OSError) as e:
            self.output_channel.log(f"Build on save failed for {path}: {e}")

    def _updated(self):
        if self.on_update_callback:
            self.on_update_callback(self.stores)
