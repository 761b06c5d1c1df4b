import json

import pytest

from shared.helper.fingerprint import EMPTY_FINGERPRINT, generate_data_hash


@pytest.mark.parametrize("data", [[], (), None, "not a list", {"monto": 1}, 42])
def test_empty_or_non_sequence_input_gives_sentinel(data):
    assert generate_data_hash(data) == EMPTY_FINGERPRINT == "empty_0_0"


def test_installment_scenario():
    data = [{"estadoCuota": "done", "monto": 100}, {"estadoCuota": "delayed", "monto": 50}]

    assert generate_data_hash(data) == "2_2_150_nodate"


def test_same_input_gives_same_fingerprint():
    data = [{"Orden": "A-1", "Cuota 1": "1.234,56", "Fecha cuota 1": "15/01/2024"}, {"Orden": "A-2", "monto": 7.5}]

    assert generate_data_hash(data) == generate_data_hash(data)


def test_field_order_does_not_matter():
    first = [{"monto": 10.5, "fecha": "01/02/2024", "cuota": "3", "saldo": "2.000,25"}]
    second = [{"saldo": "2.000,25", "cuota": "3", "fecha": "01/02/2024", "monto": 10.5}]

    assert generate_data_hash(first) == generate_data_hash(second)


def test_non_finite_values_contribute_nothing():
    data = [{"a": float("nan"), "b": float("inf"), "c": "9" * 400, "d": float("-inf")}]

    assert generate_data_hash(data) == "1_4_0_nodate"


def test_integer_beyond_float_range_contributes_nothing():
    data = json.loads('[{"monto": 1' + "0" * 400 + '}, {"monto": 25}]')

    assert generate_data_hash(data) == "2_1_25_nodate"


def test_text_with_trailing_newline_or_non_ascii_digits_is_not_a_number():
    data = [{"a": "150\n", "b": "١٥٠", "c": "15/01/2024\n"}]

    assert generate_data_hash(data) == "1_3_0_nodate"


def test_european_number_is_parsed():
    assert generate_data_hash([{"v": "1.234,56"}]) == "1_1_1234.56_nodate"


def test_plain_number_is_parsed():
    assert generate_data_hash([{"v": "1234.56"}]) == "1_1_1234.56_nodate"
    assert generate_data_hash([{"v": "-20"}]) == "1_1_-20_nodate"


def test_grouped_european_value_is_counted_once():
    data = [{"a": "1.000,50"}, {"a": "1.000,50"}]

    assert generate_data_hash(data) == "2_1_2001_nodate"


def test_ungrouped_comma_decimal_is_not_counted():
    # known gap: "56,78" matches neither numeric format
    assert generate_data_hash([{"v": "56,78"}]) == "1_1_0_nodate"


def test_grouped_value_without_decimal_part_reads_as_plain_decimal():
    assert generate_data_hash([{"v": "1.234"}]) == "1_1_1.23_nodate"


def test_latest_date_is_lexicographic_max():
    data = [{"d": "01/12/2024"}, {"d": "31/01/2024"}]

    # string max, not chronological max
    assert generate_data_hash(data) == "2_1_0_31/01/2024"


def test_date_pattern_is_strict():
    data = [{"d": "1/2/2024"}, {"d": "2024-02-01"}]

    assert generate_data_hash(data).endswith("_nodate")


def test_sum_rounds_half_up_to_two_decimals():
    assert generate_data_hash([{"a": 10.125}]) == "1_1_10.13_nodate"


def test_integral_float_sum_has_no_decimal_part():
    assert generate_data_hash([{"a": 100.0}, {"a": 50.0}]) == "2_1_150_nodate"


def test_non_record_entries_are_skipped_but_counted():
    data = [{"monto": 5}, "junk", None, 17]

    assert generate_data_hash(data) == "4_1_5_nodate"


def test_booleans_and_unset_values_only_count_as_fields():
    data = [{"flag": True, "monto": 2, "nota": None, "texto": "hola"}]

    assert generate_data_hash(data) == "1_4_2_nodate"


def test_heterogeneous_records_count_distinct_fields():
    data = [{"a": 1}, {"b": 2}, {"a": 3, "c": 4}]

    assert generate_data_hash(data) == "3_3_10_nodate"


def test_tuple_input_is_accepted():
    assert generate_data_hash(({"monto": 1},)) == "1_1_1_nodate"


def test_different_datasets_can_collide():
    # the fingerprint is a cheap summary, not a digest
    first = [{"monto": 100}, {"monto": 50}]
    second = [{"monto": 75}, {"monto": 75}]

    assert generate_data_hash(first) == generate_data_hash(second)
