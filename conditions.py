import logging
from typing import List, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.orm import Session

from models import Setting
from schemas import TriggerConditions

logger = logging.getLogger(__name__)

CONDITIONS_KEY = "triggerConditions"

class ConditionValidationError(ValueError):
    """Raised by ConditionStore.save when a threshold is left empty."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"all trigger conditions are required, missing: {', '.join(missing)}")

class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...

class SqlKeyValueStore:
    """String key/value pairs in the local `settings` table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.get(Setting, key)
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        row = self.db.get(Setting, key)
        if row:
            row.value = value
        else:
            self.db.add(Setting(key=key, value=value))
        self.db.commit()

class ConditionStore:
    def __init__(self, kv: KeyValueStore, key: str = CONDITIONS_KEY):
        self.kv = kv
        self.key = key

    def load(self) -> TriggerConditions:
        raw = self.kv.get(self.key)
        if raw is None:
            return TriggerConditions()
        try:
            return TriggerConditions.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("stored trigger conditions under %r are unreadable, ignoring: %s", self.key, e)
            return TriggerConditions()

    def save(self, conditions: TriggerConditions) -> TriggerConditions:
        missing = conditions.missing_fields()
        if missing:
            raise ConditionValidationError(missing)
        self.kv.set(self.key, conditions.model_dump_json(by_alias=True))
        logger.info("trigger conditions saved: %s", conditions.model_dump(by_alias=True, mode="json"))
        return conditions
