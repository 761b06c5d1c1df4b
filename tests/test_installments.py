from datetime import date, datetime

import pytest

from services.installments.installment_utils import (
    extract_installments,
    filter_by_date_range,
    filter_by_orden,
    filter_by_tienda,
    load_installments,
    parse_amount,
    parse_excel_date,
)
from services.installments.metrics import aggregate_metrics
from shared.models.installment import Installment


@pytest.mark.parametrize(
    "value, expected",
    [
        (45292, date(2024, 1, 1)),
        (1, date(1900, 1, 1)),
        (61, date(1900, 3, 1)),
        ("5/3/2024", date(2024, 3, 5)),
        ("15/01/2024", date(2024, 1, 15)),
        ("2024-03-05T10:00:00Z", date(2024, 3, 5)),
        ("2024-03-05", date(2024, 3, 5)),
        (datetime(2024, 3, 5, 10, 0), date(2024, 3, 5)),
        ("31/02/2024", None),
        ("not a date", None),
        ("", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        (float("inf"), None),
        (float("-inf"), None),
        (10_000_000, None),
        (10 ** 400, None),
    ],
)
def test_parse_excel_date(value, expected):
    assert parse_excel_date(value) == expected


def test_parse_amount():
    assert parse_amount(12) == 12.0
    assert parse_amount("$1,500.50") == 1500.5
    assert parse_amount("n/a") == 0.0
    assert parse_amount(None) == 0.0


def test_extract_installments_from_wide_row():
    rows = [
        {
            "Orden": "A-1",
            "FECHA DE COMPRA": "01/01/2024",
            "PAGO INICIAL": 100,
            "Estado pago inicial": "done",
            "Fecha cuota 1": "01/02/2024",
            "Cuota 1": "$1,500.50",
            "Estado cuota 1": "scheduled",
            "Fecha de pago cuota 1": "30/01/2024",
        },
        "not a row",
    ]

    installments = extract_installments(rows, tienda_map={"A-1": "Centro"})

    assert [inst.numeroCuota for inst in installments] == [0, 1]
    initial, first = installments
    assert initial.fechaCuota == date(2024, 1, 1)
    assert initial.monto == 100
    assert initial.estadoCuota == "done"
    assert initial.tienda == "Centro"
    assert first.monto == 1500.5
    assert first.fechaPago == date(2024, 1, 30)


def test_extract_skips_installments_without_date_and_amount():
    rows = [{"Orden": "A-1", "Estado cuota 3": "scheduled"}]

    assert extract_installments(rows) == []


def test_load_installments_skips_invalid_records():
    records = [{"orden": "A-1", "numeroCuota": 1, "fechaCuota": "2024-01-15"}, {"orden": "A-2"}]

    loaded = load_installments(records)

    assert len(loaded) == 1
    assert loaded[0].fechaCuota == date(2024, 1, 15)


def _inst(orden, tienda=None, **dates):
    return Installment(orden=orden, tienda=tienda, numeroCuota=1, **dates)


def test_filter_by_date_range_prefers_payment_dates():
    installments = [
        _inst("paid-real", fechaCuota=date(2024, 1, 1), fechaPago=date(2024, 3, 1), fechaPagoReal=date(2024, 2, 10)),
        _inst("paid", fechaCuota=date(2024, 1, 1), fechaPago=date(2024, 2, 5)),
        _inst("due", fechaCuota=date(2024, 2, 28)),
        _inst("outside", fechaCuota=date(2024, 3, 1)),
        _inst("undated"),
    ]

    filtered = filter_by_date_range(installments, date(2024, 2, 1), date(2024, 2, 29))

    assert [inst.orden for inst in filtered] == ["paid-real", "paid", "due"]


def test_filter_by_orden_and_tienda():
    installments = [_inst("ORD-100", "Centro"), _inst("ORD-200", "Norte"), _inst("X-1")]

    assert [i.orden for i in filter_by_orden(installments, "ord")] == ["ORD-100", "ORD-200"]
    assert len(filter_by_orden(installments, " ")) == 3
    assert [i.orden for i in filter_by_tienda(installments, "norte")] == ["ORD-200"]
    assert len(filter_by_tienda(installments, "")) == 3


def test_aggregate_metrics_buckets():
    installments = [
        {"estadoCuota": "done", "monto": 100},
        {"estadoCuota": "delayed", "monto": 50},
        {"estadoCuota": " Scheduled ", "monto": 20},
        {"estadoCuota": "graced", "monto": 5},
        {"estadoCuota": "cancelled", "monto": 1000},
        {"estadoCuota": "done"},
        Installment(orden="A-1", numeroCuota=2, monto=30, estadoCuota="DONE"),
    ]

    metrics = aggregate_metrics(installments)

    assert (metrics.paidCount, metrics.paidAmount) == (3, 130)
    assert (metrics.scheduledCount, metrics.scheduledAmount) == (2, 25)
    assert (metrics.overdueCount, metrics.overdueAmount) == (1, 50)


def test_aggregate_metrics_of_nothing():
    metrics = aggregate_metrics([])

    assert metrics.paidCount == metrics.scheduledCount == metrics.overdueCount == 0
