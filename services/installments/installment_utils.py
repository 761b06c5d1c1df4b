"""Helpers turning raw order rows into installment records and filtering them."""

import math
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import ValidationError

from shared.models.installment import Installment

MAX_INSTALLMENT_NUMBER = 14

_EXCEL_EPOCH = date(1899, 12, 31)
_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_PURCHASE_DATE_KEYS = ("FECHA DE COMPRA", "Fecha de Compra", "Fecha de compra", "Fecha Compra")


def parse_excel_date(value: Any) -> date | None:
    """Parse a date cell as exported from a spreadsheet.

    Accepts date/datetime objects, Excel serial numbers, ``D/M/YYYY`` strings and ISO strings.

    Returns:
        date | None: The parsed day, or None if the value is empty or not a date.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)):
        # NaN, infinities and serials past year 9999 are not dates
        try:
            if not math.isfinite(value) or value <= 0:
                return None
            # Excel treats 1900 as a leap year, serials from 60 on are one day ahead
            days = value - 1 if value >= 60 else value
            return _EXCEL_EPOCH + timedelta(days=int(days))
        except (OverflowError, ValueError):
            return None

    if isinstance(value, str):
        value = value.strip()
        match = _DAY_MONTH_YEAR.match(value)
        if match:
            day, month, year = (int(part) for part in match.groups())
            try:
                return date(year, month, day)
            except ValueError:
                return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None

    return None


def parse_amount(value: Any) -> float:
    """Parse an amount cell, stripping currency symbols and separators other than '.' and '-'."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(_NON_NUMERIC.sub("", str(value)))
    except ValueError:
        return 0.0


def _installment_keys(number: int) -> dict[str, str]:
    if number == 0:
        return {
            "fechaCuota": "Fecha cuota 0",
            "monto": "PAGO INICIAL",
            "estadoCuota": "Estado pago inicial",
            "fechaPago": "Fecha de pago cuota 0",
        }
    return {
        "fechaCuota": f"Fecha cuota {number}",
        "monto": f"Cuota {number}",
        "estadoCuota": f"Estado cuota {number}",
        "fechaPago": f"Fecha de pago cuota {number}",
    }


def extract_installments(rows: Iterable[Any], tienda_map: Mapping[str, str] | None = None) -> list[Installment]:
    """Convert wide order rows (installments 0-14 per row) into one record per installment.

    Installment 0 is the initial payment and falls back to the purchase date when it has
    no due date. Installments with neither a due date nor an amount are skipped, as are
    rows that are not mappings.

    Args:
        rows (Iterable[Any]): Raw order rows keyed by spreadsheet column name.
        tienda_map (Mapping[str, str] | None): Optional order → store lookup.

    Returns:
        list[Installment]: The installments in row order.
    """
    tienda_map = tienda_map or {}
    installments: list[Installment] = []

    for row in rows:
        if not isinstance(row, Mapping):
            continue
        orden = str(row.get("Orden") or "")

        for number in range(MAX_INSTALLMENT_NUMBER + 1):
            keys = _installment_keys(number)
            fecha_cuota = row.get(keys["fechaCuota"])
            monto = row.get(keys["monto"])

            if number == 0 and not fecha_cuota:
                fecha_cuota = next((row[k] for k in _PURCHASE_DATE_KEYS if row.get(k)), None)

            if not fecha_cuota and not monto:
                continue

            installments.append(
                Installment(
                    orden=orden,
                    tienda=tienda_map.get(orden),
                    numeroCuota=number,
                    fechaCuota=parse_excel_date(fecha_cuota),
                    fechaPago=parse_excel_date(row.get(keys["fechaPago"])),
                    monto=parse_amount(monto),
                    estadoCuota=str(row.get(keys["estadoCuota"]) or ""),
                )
            )

    return installments


def load_installments(records: Iterable[Any]) -> list[Installment]:
    """Validate cached installment records, skipping the ones that do not fit the model."""
    installments = []
    for record in records:
        if isinstance(record, Installment):
            installments.append(record)
            continue
        try:
            installments.append(Installment.model_validate(record))
        except ValidationError:
            continue
    return installments


def filter_by_date_range(installments: Iterable[Installment], start: date, end: date) -> list[Installment]:
    """Keep installments whose effective date lies within [start, end].

    The effective date is the real payment date, else the payment date from the orders
    file, else the due date. Installments without any date are dropped.
    """
    filtered = []
    for inst in installments:
        effective = inst.fechaPagoReal or inst.fechaPago or inst.fechaCuota
        if effective is not None and start <= effective <= end:
            filtered.append(inst)
    return filtered


def filter_by_orden(installments: Iterable[Installment], orden: str) -> list[Installment]:
    """Case-insensitive substring filter on the order number. An empty query keeps everything."""
    query = orden.strip().lower()
    return [inst for inst in installments if query in inst.orden.lower()]


def filter_by_tienda(installments: Iterable[Installment], tienda: str) -> list[Installment]:
    """Case-insensitive substring filter on the store. An empty query keeps everything."""
    query = tienda.strip().lower()
    if not query:
        return list(installments)
    return [inst for inst in installments if inst.tienda and query in inst.tienda.lower()]
