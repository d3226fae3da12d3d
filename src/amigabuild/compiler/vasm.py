import asyncio
from pathlib import Path
from typing import List, Optional, Sequence
from ..diagnostics.reconciler import DiagnosticReconciler, ReconcileScope
from ..parsing.diagnostics import CheckResult
from ..parsing.global_errors import resolve_global_errors
from ..parsing.vasm_parser import VASMParser
from ..utils.cancellation import CancellationToken
from ..utils.config import ConfigManager
from ..utils.document import TextDocument
from ..utils.lang import object_file_name
from ..utils.output import Notifier
from .errors import BuildError
from .executor import Executor
from .vlink import VLINKLinker


class VASMCompiler:
    """
    Builds m68k sources with vasm and feeds the results to the diagnostic stores.
    """
    def __init__(self, config: ConfigManager, executor: Executor, reconciler: DiagnosticReconciler,
                 workspace_root: Optional[str], linker: Optional[VLINKLinker] = None,
                 notifier: Optional[Notifier] = None):
        self.config = config
        self.executor = executor
        self.reconciler = reconciler
        self.workspace_root = workspace_root
        self.linker = linker if linker else VLINKLinker(config, executor)
        self.notifier = notifier if notifier else reconciler.notifier
        self.parser = VASMParser()

    def ensure_enabled(self):
        conf = self.config.get("vasm")
        if not conf or not conf.get("enabled"):
            raise BuildError("VASM compilation is disabled in the configuration")

    def get_workspace_root_dir(self) -> Optional[Path]:
        if self.workspace_root:
            return Path(self.workspace_root).resolve()
        return None

    def get_build_dir(self) -> Optional[Path]:
        root = self.get_workspace_root_dir()
        if root:
            return root / self.config.get("build_dir", "build")
        return None

    def mkdir(self, dir_path: Path):
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.notifier.show_error_message(f"Error creating build dir: {dir_path}")
            raise BuildError(f"Error creating build dir: {dir_path}") from e

    async def build_file(self, file_path: str, debug: bool = False,
                         token: Optional[CancellationToken] = None) -> List[CheckResult]:
        """
        Assembles one file into the build directory.
        debug adds line debug information to the object.
        """
        root = self.get_workspace_root_dir()
        build_dir = self.get_build_dir()
        if not root or not build_dir:
            raise BuildError("Root workspace path not found")

        conf = self.config.get("vasm")
        if not conf or not conf.get("file"):
            raise BuildError("Please configure VASM compiler")

        self.mkdir(build_dir)
        obj_file = build_dir / object_file_name(file_path)
        args = list(conf.get("options", []))
        if debug:
            args.append("-linedebug")
        args += ["-o", str(obj_file), str(file_path)]
        return await self.executor.run_tool(
            conf["file"],
            args,
            self.parser,
            cwd=str(root),
            use_stderr=True,
            token=token,
        )

    def process_global_errors(self, document: TextDocument, errors: Sequence[CheckResult]) -> List[CheckResult]:
        return resolve_global_errors(document, errors)

    async def build_document(self, document: TextDocument, debug: bool = False,
                             token: Optional[CancellationToken] = None) -> List[CheckResult]:
        """Builds the document and shows its diagnostics."""
        try:
            errors = await self.build_file(document.file_name, debug, token)
        except BuildError as e:
            self.notifier.show_information_message(f"Error: {e}")
            raise
        errors = self.process_global_errors(document, errors)
        self.reconciler.reconcile(document, errors, ReconcileScope.BOTH)
        return errors

    def find_files(self, includes: str, excludes: str = "") -> List[Path]:
        root = self.get_workspace_root_dir()
        if not root:
            return []
        build_dir = self.get_build_dir()
        excluded = set(root.glob(excludes)) if excludes else set()
        found = []
        for path in root.glob(includes):
            if not path.is_file() or path in excluded:
                continue
            if build_dir and build_dir in path.parents:
                continue
            found.append(path)
        return sorted(found)

    async def build_workspace(self, token: Optional[CancellationToken] = None) -> List[CheckResult]:
        """
        Assembles every workspace source, then links them if none reported anything.
        """
        conf = self.config.get("vlink")
        if not conf or not conf.get("enabled"):
            raise BuildError("Please configure VLINK linker")

        root = self.get_workspace_root_dir()
        build_dir = self.get_build_dir()
        if not root or not build_dir:
            raise BuildError("Root workspace path not found")

        files = self.find_files(conf.get("includes", "**/*.s"), conf.get("excludes", ""))
        documents = [TextDocument.open(str(f)) for f in files]
        per_file = await asyncio.gather(*(self._compile_document(d, token) for d in documents))

        compile_errors = [error for errors in per_file for error in errors]
        if compile_errors:
            self.reconciler.reconcile(None, compile_errors, ReconcileScope.BOTH, open_documents=documents)
            raise BuildError("Build aborted: there are compile errors")

        errors = await self.linker.link_files(files, conf.get("exefilename", "a.out"), root, build_dir, token)
        self.reconciler.reconcile(None, errors, ReconcileScope.BOTH)
        return errors

    async def _compile_document(self, document: TextDocument,
                                token: Optional[CancellationToken]) -> List[CheckResult]:
        errors = await self.build_file(document.file_name, token=token)
        return self.process_global_errors(document, errors)
