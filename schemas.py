from datetime import date, datetime
from enum import Enum
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List

class TransactionStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"

class Transaction(BaseModel):
    """One supply-chain event, as typed into the form or stored in a block."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sender: str = ""
    recipient: str = ""
    product: str = ""
    quantity: str = ""  # free text, read as an integer by the rules
    location: str = ""
    status: Optional[TransactionStatus] = None
    temperature: str = ""
    delivery_date: str = Field("", alias="deliveryDate")

    @field_validator(
        "sender", "recipient", "product", "quantity",
        "location", "temperature", "delivery_date", mode="before",
    )
    @classmethod
    def _as_text(cls, v):
        if v is None:
            return ""
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("status", mode="before")
    @classmethod
    def _blank_status(cls, v):
        return None if v == "" else v

class PendingTransaction(Transaction):
    id: Optional[str] = Field(None, alias="_id")  # assigned by the remote service

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        if v is None or v == "":
            return None
        return str(v)

class PendingTransactionRow(PendingTransaction):
    meets_conditions: bool
    failed_rules: List[str] = Field(default_factory=list)

class MinedBlock(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int
    timestamp: datetime
    previous_hash: str
    proof: int
    transactions: List[Transaction] = Field(default_factory=list)

    @field_validator("previous_hash", mode="before")
    @classmethod
    def _hash_as_text(cls, v):
        # genesis blocks often carry a bare number here
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

class TriggerConditions(BaseModel):
    """Admission thresholds. A field left as None does not constrain anything."""
    model_config = ConfigDict(populate_by_name=True)

    min_quantity: Optional[int] = Field(
        None, ge=0,
        validation_alias=AliasChoices("minQuantity", "min_quantity", "quantity"),
        serialization_alias="minQuantity",
    )
    max_temperature: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("maxTemperature", "max_temperature", "temperature"),
        serialization_alias="maxTemperature",
    )
    max_delivery_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("maxDeliveryDate", "max_delivery_date", "deliveryDate"),
        serialization_alias="maxDeliveryDate",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def missing_fields(self) -> List[str]:
        missing = []
        if self.min_quantity is None:
            missing.append("minQuantity")
        if self.max_temperature is None:
            missing.append("maxTemperature")
        if self.max_delivery_date is None:
            missing.append("maxDeliveryDate")
        return missing

class MineDecision(BaseModel):
    allowed: bool
    offending: List[PendingTransaction] = Field(default_factory=list)

class Overview(BaseModel):
    pending_count: int
    chain_length: int
    conditions: TriggerConditions
