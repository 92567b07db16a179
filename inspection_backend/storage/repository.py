"""Inspection persistence: repository interface plus in-memory and JSON file stores."""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..models.inspection import Inspection, InspectionStatus, ManifestItem
from ..utils.errors import NotFoundError

logger = logging.getLogger(__name__)


class InspectionRepository(ABC):
    """
    Storage collaborator injected into the review service.

    Implementations store each inspection as one unit; ``put`` replaces the
    whole aggregate.
    """

    @abstractmethod
    def get(self, inspection_id: str) -> Inspection:
        """
        Load an inspection.

        Raises:
            NotFoundError: If no inspection has that id
        """

    @abstractmethod
    def put(self, inspection: Inspection) -> None:
        """Store an inspection, replacing any previous version."""

    @abstractmethod
    def find_next_pending(self) -> Optional[ManifestItem]:
        """First manifest item still pending review, or None."""

    @abstractmethod
    def next_invoice_sequence(self, year: int) -> int:
        """Allocate the next invoice sequence number for ``year`` (starts at 1)."""


class InMemoryInspectionRepository(InspectionRepository):
    """Dictionary-backed repository for tests and embedding."""

    def __init__(
        self,
        inspections: Optional[Iterable[Inspection]] = None,
        manifest: Optional[Iterable[ManifestItem]] = None
    ):
        self._lock = threading.Lock()
        self._inspections: Dict[str, Inspection] = {i.id: i for i in inspections or []}
        self._manifest: List[ManifestItem] = list(manifest or [])
        self._counters: Dict[int, int] = {}

    def get(self, inspection_id: str) -> Inspection:
        with self._lock:
            inspection = self._inspections.get(inspection_id)
        if inspection is None:
            raise NotFoundError.inspection(inspection_id)
        return inspection

    def put(self, inspection: Inspection) -> None:
        with self._lock:
            self._inspections[inspection.id] = inspection

    def find_next_pending(self) -> Optional[ManifestItem]:
        with self._lock:
            for item in self._manifest:
                if item.status == InspectionStatus.PENDING:
                    return item
        return None

    def next_invoice_sequence(self, year: int) -> int:
        with self._lock:
            self._counters[year] = self._counters.get(year, 0) + 1
            return self._counters[year]


class JsonFileInspectionRepository(InspectionRepository):
    """
    One JSON file per inspection under ``data_dir``.

    Layout:
        <data_dir>/<inspection_id>.json
        <data_dir>/manifest.json
        <data_dir>/invoice_counters.json
    """

    MANIFEST_FILE = "manifest.json"
    COUNTERS_FILE = "invoice_counters.json"

    def __init__(self, data_dir: str = "data/inspections"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

        logger.info(f"Initialized JsonFileInspectionRepository: data_dir={self.data_dir}")

    def _inspection_path(self, inspection_id: str) -> Path:
        safe_id = Path(inspection_id).name
        if not safe_id or safe_id != inspection_id:
            raise NotFoundError.inspection(inspection_id)
        return self.data_dir / f"{safe_id}.json"

    def _write_json(self, path: Path, data) -> None:
        # Write to a temp file first so a crash never leaves half an aggregate
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except Exception:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    def _read_json(self, path: Path, default):
        if not path.exists():
            return default
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def get(self, inspection_id: str) -> Inspection:
        path = self._inspection_path(inspection_id)
        with self._lock:
            if not path.exists():
                raise NotFoundError.inspection(inspection_id)
            data = self._read_json(path, None)
        logger.debug(f"Loaded inspection {inspection_id} from {path}")
        return Inspection.from_dict(data)

    def put(self, inspection: Inspection) -> None:
        path = self._inspection_path(inspection.id)
        with self._lock:
            self._write_json(path, inspection.to_dict())
        logger.debug(f"Saved inspection {inspection.id} to {path}")

    def list_ids(self) -> List[str]:
        reserved = {self.MANIFEST_FILE, self.COUNTERS_FILE}
        return sorted(p.stem for p in self.data_dir.glob("*.json") if p.name not in reserved)

    def load_manifest(self) -> List[ManifestItem]:
        with self._lock:
            data = self._read_json(self.data_dir / self.MANIFEST_FILE, [])
        return [ManifestItem.from_dict(item) for item in data]

    def save_manifest(self, items: Iterable[ManifestItem]) -> None:
        with self._lock:
            self._write_json(self.data_dir / self.MANIFEST_FILE, [item.to_dict() for item in items])

    def find_next_pending(self) -> Optional[ManifestItem]:
        for item in self.load_manifest():
            if item.status == InspectionStatus.PENDING:
                return item
        return None

    def next_invoice_sequence(self, year: int) -> int:
        path = self.data_dir / self.COUNTERS_FILE
        with self._lock:
            counters = self._read_json(path, {})
            sequence = int(counters.get(str(year), 0)) + 1
            counters[str(year)] = sequence
            self._write_json(path, counters)
        logger.info(f"Allocated invoice sequence {sequence} for {year}")
        return sequence
