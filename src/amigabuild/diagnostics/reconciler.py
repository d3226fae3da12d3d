from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
from ..parsing.diagnostics import CheckResult, Severity
from ..utils.document import TextDocument, canonical_path
from ..utils.output import Notifier
from .store import DiagnosticStores, PositionedMarker


class ReconcileScope(Enum):
    ERRORS_ONLY = "errors"
    WARNINGS_ONLY = "warnings"
    BOTH = "both"

    @property
    def severities(self) -> Tuple[Severity, ...]:
        if self == ReconcileScope.ERRORS_ONLY:
            return (Severity.ERROR,)
        if self == ReconcileScope.WARNINGS_ONLY:
            return (Severity.WARNING,)
        return (Severity.ERROR, Severity.WARNING)


def derive_columns(text: str, col: int = 0) -> Tuple[int, int]:
    """
    Column range covering the line without its surrounding whitespace.
    An explicit 1-based col moves the start only.
    """
    leading = len(text) - len(text.lstrip())
    trailing = len(text) - len(text.rstrip())
    start = col - 1 if col > 0 else leading
    end = len(text) - trailing
    return start, max(start, end)


class DiagnosticReconciler:
    """
    Replaces the content of the stores with a new batch of check results.

    Errors always win over warnings on the same line, whichever store was
    updated last.
    """
    def __init__(self, stores: DiagnosticStores, notifier: Optional[Notifier] = None):
        self.stores = stores
        self.notifier = notifier if notifier else Notifier()

    def reconcile(self, document: Optional[TextDocument], results: Sequence[CheckResult],
                  scope: ReconcileScope = ReconcileScope.BOTH,
                  open_documents: Sequence[TextDocument] = ()):
        """
        Clears the stores in scope, then commits the results file by file.
        Results without a line become notifications. open_documents are used,
        like document, to derive columns from the line text.
        """
        documents = {d.uri: d for d in open_documents}
        if document:
            documents[document.uri] = document

        with self.stores.lock:
            for severity in scope.severities:
                self.stores.for_severity(severity).clear()

            grouped: Dict[str, Dict[Severity, List[PositionedMarker]]] = {}
            for result in results:
                if result.is_global:
                    self.notifier.show_error_message(result.msg)
                    continue
                marker = self.to_marker(document, result, documents)
                grouped.setdefault(marker.file, {}).setdefault(marker.severity, []).append(marker)

            for file, groups in grouped.items():
                for severity in scope.severities:
                    self.stores.for_severity(severity).set(file, groups.get(severity))
                self._suppress_covered_warnings(file)

    def to_marker(self, document: Optional[TextDocument], result: CheckResult,
                  documents: Optional[Dict[str, TextDocument]] = None) -> PositionedMarker:
        if result.file:
            file = canonical_path(result.file)
        elif document:
            file = document.uri
        else:
            file = ""

        if documents is None:
            documents = {document.uri: document} if document else {}
        source = documents.get(file)

        start_column, end_column = 0, 1
        if source and result.line <= source.line_count:
            text = source.line_at(result.line - 1).text
            start_column, end_column = derive_columns(text, result.col)

        return PositionedMarker(
            file=file,
            line=result.line,
            start_column=start_column,
            end_column=end_column,
            msg=result.msg,
            severity=Severity.from_label(result.severity),
        )

    def _suppress_covered_warnings(self, file: str):
        errors = self.stores.errors.get(file)
        warnings = self.stores.warnings.get(file)
        if not errors or not warnings:
            return
        error_lines = {marker.line for marker in errors}
        self.stores.warnings.set(file, [w for w in warnings if w.line not in error_lines])
