import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from .plates import is_valid_plate, normalize_plate
from .schemas import Vehicle

load_dotenv()
DEFAULT_DATA_PATH = "data/vehicles.json"

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[Vehicle])


class StoreLoadError(RuntimeError):
    pass


def get_data_path() -> Path:
    return Path(os.environ.get("DATA_PATH") or DEFAULT_DATA_PATH).resolve()


class VehicleStore:
    """
    The in-memory vehicle collection backed by one JSON document.

    The document is read once by ``load`` and rewritten as a whole by ``persist``.
    Records are kept as plain dicts with the same camelCase keys as the file.
    """

    def __init__(self, path: Union[str, Path], vehicles: Optional[List[Dict[str, Any]]] = None):
        self.path = Path(path)
        self.vehicles: List[Dict[str, Any]] = vehicles if vehicles is not None else []

    def load(self) -> "VehicleStore":
        if not self.path.exists():
            logger.warning("vehicle data file %s not found; starting with an empty fleet", self.path)
            self.vehicles = []
            return self
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreLoadError(f"Cannot read vehicle data file {self.path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise StoreLoadError(f"Vehicle data file {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise StoreLoadError(f"Vehicle data file {self.path} must contain a JSON array")
        try:
            _records_adapter.validate_python(data)
        except ValidationError as exc:
            raise StoreLoadError(f"Vehicle data file {self.path} has invalid records: {exc}") from exc

        self.vehicles = [dict(item) for item in data]
        self._warn_on_plate_drift()
        logger.info("loaded %d vehicles from %s", len(self.vehicles), self.path)
        return self

    def _warn_on_plate_drift(self) -> None:
        # records are kept as loaded, drift is only reported
        seen: Dict[str, str] = {}
        for vehicle in self.vehicles:
            plate = vehicle["licensePlate"]
            normalized = normalize_plate(plate)
            if plate != normalized or not is_valid_plate(normalized):
                logger.warning("vehicle %s has non-normalized license plate %r in %s", vehicle["id"], plate, self.path)
            if normalized in seen:
                logger.warning(
                    "vehicles %s and %s share license plate %s in %s",
                    seen[normalized],
                    vehicle["id"],
                    normalized,
                    self.path,
                )
            else:
                seen[normalized] = vehicle["id"]

    def persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.vehicles, indent=2), encoding="utf-8")
        logger.debug("persisted %d vehicles to %s", len(self.vehicles), self.path)
