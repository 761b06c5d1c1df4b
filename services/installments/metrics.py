from collections.abc import Iterable, Mapping
from typing import Any

from shared.models.installment import (
    STATUS_DELAYED,
    STATUS_DONE,
    STATUS_GRACED,
    STATUS_SCHEDULED,
    InstallmentMetrics,
)


def _field(installment: Any, name: str) -> Any:
    if isinstance(installment, Mapping):
        return installment.get(name)
    return getattr(installment, name, None)


def aggregate_metrics(installments: Iterable[Any]) -> InstallmentMetrics:
    """Sum counts and amounts per status bucket.

    Accepts Installment models or plain records as read from the cache. Statuses are
    compared trimmed and case-insensitive; unknown statuses are ignored.
    """
    metrics = InstallmentMetrics()

    for installment in installments:
        status = str(_field(installment, "estadoCuota") or "").strip().lower()
        amount = _field(installment, "monto")
        if not isinstance(amount, (int, float)) or isinstance(amount, bool):
            amount = 0

        if status == STATUS_DONE:
            metrics.paidCount += 1
            metrics.paidAmount += amount
        elif status in (STATUS_SCHEDULED, STATUS_GRACED):
            metrics.scheduledCount += 1
            metrics.scheduledAmount += amount
        elif status == STATUS_DELAYED:
            metrics.overdueCount += 1
            metrics.overdueAmount += amount

    return metrics
