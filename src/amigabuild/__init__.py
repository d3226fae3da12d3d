"""
amigabuild: runs vasm/vlink and turns their output into editor diagnostics.
"""
from .parsing.diagnostics import CheckResult, OutputParser, Severity
from .compiler.executor import Executor
from .diagnostics.reconciler import DiagnosticReconciler, ReconcileScope
from .diagnostics.store import DiagnosticStores, PositionedMarker
