from dataclasses import dataclass
from typing import Callable, Iterable, List

from schemas import MineDecision, PendingTransaction, Transaction, TriggerConditions
from utils import parse_date, parse_int

# unset thresholds pass, for the mining gate and the per-row flag alike

@dataclass(frozen=True)
class Rule:
    name: str
    check: Callable[[Transaction, TriggerConditions], bool]

def _quantity_ok(tx: Transaction, cond: TriggerConditions) -> bool:
    if cond.min_quantity is None:
        return True
    qty = parse_int(tx.quantity)
    return qty is not None and qty >= cond.min_quantity

def _temperature_ok(tx: Transaction, cond: TriggerConditions) -> bool:
    if cond.max_temperature is None:
        return True
    temp = parse_int(tx.temperature)
    return temp is not None and temp <= cond.max_temperature

def _delivery_date_ok(tx: Transaction, cond: TriggerConditions) -> bool:
    if cond.max_delivery_date is None:
        return True
    delivery = parse_date(tx.delivery_date)
    return delivery is not None and delivery <= cond.max_delivery_date

RULES: List[Rule] = [
    Rule("quantity", _quantity_ok),
    Rule("temperature", _temperature_ok),
    Rule("deliveryDate", _delivery_date_ok),
]

def failed_rules(tx: Transaction, cond: TriggerConditions) -> List[str]:
    return [rule.name for rule in RULES if not rule.check(tx, cond)]

def evaluate(tx: Transaction, cond: TriggerConditions) -> bool:
    return not failed_rules(tx, cond)

def can_mine(pending: Iterable[PendingTransaction], cond: TriggerConditions) -> MineDecision:
    """All-or-nothing: any failing transaction refuses the whole mine."""
    offending = [tx for tx in pending if not evaluate(tx, cond)]
    return MineDecision(allowed=not offending, offending=offending)
