import json
import logging
from typing import Dict, Optional

from PySide6.QtCore import QObject, QTimer, Signal

DEFAULT_DEBOUNCE_MS = 600


def _signature(params, metadata, last_step, last_path) -> str:
    return json.dumps(
        {"params": params, "metadata": metadata, "last_step": last_step, "last_path": last_path},
        sort_keys=True,
    )


class DraftPersistor(QObject):
    """
    Speichert Entwürfe verzögert: schnelle Änderungen werden zusammengefasst
    und erst nach `debounce_ms` Ruhe geschrieben. `flush()` bricht den Timer
    ab und speichert sofort. Bei gleichzeitigen Änderungen gewinnt der
    zuletzt übergebene Stand.
    """
    saved = Signal(str)
    error = Signal(str)
    draft_id_changed = Signal(str)

    def __init__(self, store, draft_id: Optional[str] = None, debounce_ms: int = DEFAULT_DEBOUNCE_MS,
                 enabled: bool = True, parent=None):
        super().__init__(parent)
        self.store = store
        self.draft_id = draft_id
        self.enabled = enabled
        self._snapshot = None
        self._last_persisted = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(debounce_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    def update(self, params: Dict[str, str], metadata: Optional[dict] = None,
               last_step: Optional[str] = None, last_path: Optional[str] = None):
        """Neuen Stand merken und (falls geändert) den Timer neu starten."""
        self._snapshot = (dict(params), dict(metadata) if metadata else None, last_step, last_path)
        if not self.enabled:
            return
        if _signature(*self._snapshot) == self._last_persisted:
            return
        self._timer.start()

    def cancel(self):
        """Ausstehendes Speichern verwerfen, z.B. wenn der Editor geschlossen wird."""
        self._timer.stop()

    def flush(self) -> Optional[str]:
        self._timer.stop()
        return self._persist()

    def _on_timeout(self):
        try:
            self._persist()
        except Exception as e:
            logging.error(f"[DueSoon] Entwurf konnte nicht gespeichert werden: {e}")
            self.error.emit(str(e))

    def _persist(self) -> Optional[str]:
        if not self.enabled or self._snapshot is None:
            return self.draft_id
        params, metadata, last_step, last_path = self._snapshot
        if self.draft_id is None:
            draft = self.store.create_draft(params, metadata, last_step, last_path)
            self.draft_id = draft.id
            self.draft_id_changed.emit(draft.id)
        else:
            self.store.update_draft(self.draft_id, params, metadata, last_step, last_path)
        self._last_persisted = _signature(params, metadata, last_step, last_path)
        self.saved.emit(self.draft_id)
        return self.draft_id
