from datetime import date

from pydantic import BaseModel

STATUS_DONE = "done"
STATUS_SCHEDULED = "scheduled"
STATUS_GRACED = "graced"
STATUS_DELAYED = "delayed"


class Installment(BaseModel):
    """
    A single installment of an order, in long format (one record per installment).

    numeroCuota 0 is the initial payment.
    """
    orden: str
    tienda: str | None = None
    numeroCuota: int
    fechaCuota: date | None = None
    fechaPago: date | None = None
    fechaPagoReal: date | None = None
    monto: float = 0.0
    estadoCuota: str = ""


class InstallmentMetrics(BaseModel):
    """
    Display metrics per status bucket: paid (done), scheduled (scheduled + graced) and overdue (delayed).
    """
    paidCount: int = 0
    paidAmount: float = 0.0
    scheduledCount: int = 0
    scheduledAmount: float = 0.0
    overdueCount: int = 0
    overdueAmount: float = 0.0
