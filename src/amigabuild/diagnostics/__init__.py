from .store import DiagnosticCollection, DiagnosticStores, PositionedMarker
from .reconciler import DiagnosticReconciler, ReconcileScope, derive_columns
