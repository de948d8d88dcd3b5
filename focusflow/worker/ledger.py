# focusflow/worker/ledger.py

from typing import Dict, Tuple

# (entity id, rule, cycle discriminator)
LedgerKey = Tuple[str, str, str]


class FiredRuleLedger:
    """Composite keys that already produced an alert.

    Owned by one scheduler and lives as long as it does. Entries are never
    removed one by one; a new due date or a new day gives a new key.
    """

    def __init__(self) -> None:
        self._fired: Dict[LedgerKey, bool] = {}

    def has(self, key: LedgerKey) -> bool:
        return self._fired.get(key, False)

    def mark(self, key: LedgerKey) -> None:
        self._fired[key] = True

    def clear(self) -> None:
        self._fired.clear()

    def __contains__(self, key: LedgerKey) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return len(self._fired)
