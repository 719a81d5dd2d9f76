# treasury.py
from config import CONFIG_MODEL, SimulationConfig
from logger import log


class Treasury:
    """
    The city's money balance.

    Integer amounts only; the balance may go negative through commercial
    losses but never through upkeep or placement, which check affordability.
    """

    def __init__(
        self, initial_balance: int | None = None, config: SimulationConfig | None = None
    ) -> None:
        self.config: SimulationConfig = config or CONFIG_MODEL
        self._balance: int = (
            int(initial_balance)
            if initial_balance is not None
            else self.config.treasury.initial_balance
        )

    @property
    def balance(self) -> int:
        return self._balance

    def can_afford(self, amount: int) -> bool:
        return self._balance >= amount

    def spend(self, amount: int) -> None:
        """Debit unconditionally; callers check can_afford first."""
        self._balance -= int(amount)
        log(f"Treasury: spent {amount} -> balance {self._balance}.", level="DEBUG")

    def add(self, amount: int) -> None:
        """Credit the balance; negative amounts are debits (commercial losses)."""
        self._balance += int(amount)
        log(f"Treasury: added {amount} -> balance {self._balance}.", level="DEBUG")

    def try_pay(self, amount: int) -> bool:
        """Debit ``amount`` only if the balance covers it."""
        if not self.can_afford(amount):
            log(f"Treasury: cannot afford {amount} (balance {self._balance}).", level="INFO")
            return False
        self.spend(amount)
        return True
