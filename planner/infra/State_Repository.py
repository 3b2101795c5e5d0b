"""Planner state repository (JSON file persistence in the backup/export shape)."""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from planner.domain.PlannerState import PlannerState
from planner.logic.importing.state_io import import_state, validate_payload
from planner.utilities.config import STATE_FILE

logger = logging.getLogger(__name__)


class StateRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or STATE_FILE)

    def load(self) -> Optional[PlannerState]:
        """Return the stored state, or None when the file is absent or unusable."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read planner state from {self.path}: {e}")
            return None
        if not validate_payload(data):
            logger.error(f"Stored planner state at {self.path} has an invalid shape")
            return None
        # Going through import upgrades legacy cells written by older versions
        state = import_state(PlannerState(), data)
        if data.get("inventorySort") in ("category", "expiry"):
            state.inventory_sort = data["inventorySort"]
        return state

    def save(self, state: PlannerState) -> bool:
        """Atomic write: dump to a temp file in the same directory, then move it into place."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".planner_", suffix=".json")
        except OSError as e:
            logger.error(f"Could not prepare state file {self.path}: {e}")
            return False
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(state.to_dict(), tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
            return True
        except OSError as e:
            logger.error(f"Could not save planner state to {self.path}: {e}")
            return False
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
