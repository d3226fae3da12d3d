"""
Unit tests for VASMCompiler. The executor is mocked — no assembler needed.
"""
import asyncio
import copy
import pytest
from unittest.mock import patch, MagicMock, AsyncMock
from amigabuild.compiler.errors import BuildError
from amigabuild.compiler.vasm import VASMCompiler
from amigabuild.diagnostics.reconciler import DiagnosticReconciler
from amigabuild.diagnostics.store import DiagnosticStores
from amigabuild.parsing.diagnostics import CheckResult
from amigabuild.utils.config import ConfigManager, DEFAULT_CONFIG
from amigabuild.utils.document import TextDocument, canonical_path


def _make_config(**overrides):
    with patch.object(ConfigManager, "__init__", lambda self: None):
        config = ConfigManager()
    config.config = copy.deepcopy(DEFAULT_CONFIG)
    config.config.update(overrides)
    return config


def _make_compiler(workspace, results=None, **overrides):
    executor = MagicMock()
    executor.run_tool = AsyncMock(return_value=results or [])
    stores = DiagnosticStores()
    reconciler = DiagnosticReconciler(stores, MagicMock())
    root = str(workspace) if workspace else None
    compiler = VASMCompiler(_make_config(**overrides), executor, reconciler, root)
    return compiler, executor, stores


class TestBuildFile:
    """Command line passed to vasm."""

    def test_arguments(self, tmp_path):
        root = tmp_path.resolve()
        source = root / "main.s"
        compiler, executor, _ = _make_compiler(root)
        asyncio.run(compiler.build_file(str(source)))
        cmd, args, parser = executor.run_tool.call_args[0]
        assert cmd == "vasmm68k_mot"
        assert args == ["-m68000", "-Fhunk", "-o", str(root / "build" / "main.o"), str(source)]
        assert parser is compiler.parser
        assert executor.run_tool.call_args[1]["cwd"] == str(root)
        assert executor.run_tool.call_args[1]["use_stderr"] is True

    def test_build_dir_created(self, tmp_path):
        compiler, _, _ = _make_compiler(tmp_path)
        asyncio.run(compiler.build_file(str(tmp_path / "main.s")))
        assert (tmp_path / "build").is_dir()

    def test_debug_adds_linedebug_once(self, tmp_path):
        compiler, executor, _ = _make_compiler(tmp_path)
        asyncio.run(compiler.build_file(str(tmp_path / "main.s"), debug=True))
        asyncio.run(compiler.build_file(str(tmp_path / "main.s"), debug=True))
        args = executor.run_tool.call_args[0][1]
        assert args.count("-linedebug") == 1
        assert "-linedebug" not in compiler.config.get("vasm")["options"]

    def test_no_workspace(self):
        compiler, _, _ = _make_compiler(None)
        with pytest.raises(BuildError, match="Root workspace path not found"):
            asyncio.run(compiler.build_file("/ws/main.s"))

    def test_unconfigured_assembler(self, tmp_path):
        compiler, _, _ = _make_compiler(tmp_path, vasm={})
        with pytest.raises(BuildError, match="Please configure VASM compiler"):
            asyncio.run(compiler.build_file(str(tmp_path / "main.s")))

    def test_build_dir_creation_failure(self, tmp_path):
        (tmp_path / "build").write_text("not a directory")
        compiler, _, _ = _make_compiler(tmp_path)
        with pytest.raises(BuildError, match="Error creating build dir"):
            asyncio.run(compiler.build_file(str(tmp_path / "main.s")))
        compiler.notifier.show_error_message.assert_called_once()

    def test_ensure_enabled(self, tmp_path):
        compiler, _, _ = _make_compiler(tmp_path, vasm={"enabled": False, "file": "vasm"})
        with pytest.raises(BuildError, match="disabled"):
            compiler.ensure_enabled()


class TestBuildDocument:
    """Results go through the global error resolver into the stores."""

    def test_diagnostics_stored(self, tmp_path):
        root = tmp_path.resolve()
        doc = TextDocument(str(root / "main.s"), "\tinclude \"hw.i\"\n  mvoe.l d0,d1\n")
        results = [
            CheckResult(file=doc.file_name, line=2, msg="error 2: unknown mnemonic", severity="error"),
            CheckResult(line=0, msg="fatal error 13 : could not open <hw.i> for input"),
        ]
        compiler, _, stores = _make_compiler(root, results)
        errors = asyncio.run(compiler.build_document(doc))
        assert errors[1].line == 1
        assert errors[1].file == doc.file_name
        markers = stores.errors.get(doc.uri)
        assert [m.line for m in markers] == [2, 1]
        assert markers[0].start_column == 2

    def test_warnings_stored(self, tmp_path):
        doc = TextDocument(str(tmp_path / "main.s"), "\tbra.b far\n")
        results = [CheckResult(file=doc.file_name, line=1, msg="warning 51: bra.b changed", severity="warning")]
        compiler, _, stores = _make_compiler(tmp_path, results)
        asyncio.run(compiler.build_document(doc))
        assert len(stores.warnings.get(doc.uri)) == 1

    def test_unresolved_global_error_notified(self, tmp_path):
        doc = TextDocument(str(tmp_path / "main.s"), "\trts\n")
        compiler, _, stores = _make_compiler(tmp_path, [CheckResult(line=0, msg="fatal error 2 : out of memory")])
        asyncio.run(compiler.build_document(doc))
        compiler.reconciler.notifier.show_error_message.assert_called_once_with("fatal error 2 : out of memory")
        assert len(stores.errors) == 0

    def test_build_error_is_shown_and_raised(self):
        compiler, _, _ = _make_compiler(None)
        with pytest.raises(BuildError):
            asyncio.run(compiler.build_document(TextDocument("/ws/main.s", "")))
        compiler.notifier.show_information_message.assert_called_once_with("Error: Root workspace path not found")


class TestBuildWorkspace:
    """Compile everything, then link."""

    def _workspace(self, tmp_path):
        root = tmp_path.resolve()
        (root / "a.s").write_text("\trts\n")
        (root / "sub").mkdir()
        (root / "sub" / "b.s").write_text("\tnop\n")
        (root / "notes.txt").write_text("x")
        return root

    def test_find_files(self, tmp_path):
        root = self._workspace(tmp_path)
        (root / "build").mkdir()
        (root / "build" / "stale.s").write_text("")
        compiler, _, _ = _make_compiler(root)
        assert compiler.find_files("**/*.s") == [root / "a.s", root / "sub" / "b.s"]
        assert compiler.find_files("**/*.s", "sub/*.s") == [root / "a.s"]

    def test_links_when_clean(self, tmp_path):
        root = self._workspace(tmp_path)
        compiler, executor, _ = _make_compiler(root)
        asyncio.run(compiler.build_workspace())
        assert executor.run_tool.call_count == 3
        cmd, args, parser = executor.run_tool.call_args[0]
        assert cmd == "vlink"
        assert parser is compiler.linker.parser
        build = root / "build"
        assert args == ["-bamigahunk", "-Bstatic", "-o", str(build / "a.out"),
                        str(build / "a.o"), str(build / "b.o")]

    def test_link_results_reconciled(self, tmp_path):
        root = self._workspace(tmp_path)
        compiler, executor, stores = _make_compiler(root)
        link_error = CheckResult(file=str(root / "a.s"), line=1, msg="error 8: bad reloc", severity="error")
        executor.run_tool.side_effect = [[], [], [link_error]]
        assert asyncio.run(compiler.build_workspace()) == [link_error]
        assert len(stores.errors.get(canonical_path(str(root / "a.s")))) == 1

    def test_aborts_on_compile_errors(self, tmp_path):
        root = self._workspace(tmp_path)
        error = CheckResult(file=str(root / "a.s"), line=1, msg="error 2: bad", severity="error")
        compiler, executor, stores = _make_compiler(root, [error])
        with pytest.raises(BuildError, match="Build aborted: there are compile errors"):
            asyncio.run(compiler.build_workspace())
        assert executor.run_tool.call_count == 2
        marker = stores.errors.get(canonical_path(str(root / "a.s")))[0]
        assert marker.start_column == 1

    def test_linker_disabled(self, tmp_path):
        compiler, _, _ = _make_compiler(tmp_path, vlink={"enabled": False})
        with pytest.raises(BuildError, match="Please configure VLINK linker"):
            asyncio.run(compiler.build_workspace())
