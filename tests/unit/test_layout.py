from __future__ import annotations

from datetime import date

from shipclip.clip.layout import DEFAULT_STATUS, ColumnLayout, read_column_layout

# tracking, sequence, COD, name, phone, zip, shipping cost, status
EXPORT_ROW = ["EF582568151TH", "718.", "1,250", "Somchai Jaidee", "0812345678", "10110", "45", "รับฝาก"]


def test_full_export_row():
    assert read_column_layout(EXPORT_ROW, "EF582568151TH") == ColumnLayout(
        phone_number="0812345678",
        customer_name="Somchai Jaidee",
        sequence_number="718",
        cod_amount=1250.0,
        shipping_cost=45.0,
        status="รับฝาก",
    )


def test_sequence_and_prefix_in_name_column():
    layout = read_column_layout(
        ["JN123456789TH", "250. FB. Malee", "089-123-4567", "10250", "38", "Delivered"],
        "JN123456789TH",
    )
    assert layout is not None
    assert layout.customer_name == "Malee"
    assert layout.sequence_number == "250"
    assert layout.cod_amount is None
    assert layout.shipping_cost == 38.0
    assert layout.status == "Delivered"


def test_sequence_only_column_before_name():
    layout = read_column_layout(["JN123456789TH", "12.", "Nok", "0823456789", "10110"], "JN123456789TH")
    assert layout is not None
    assert layout.sequence_number == "12"
    assert layout.cod_amount is None


def test_nine_digit_phone_gets_leading_zero():
    layout = read_column_layout(["JN123456789TH", "Nok", "823456789", "10110"], "JN123456789TH")
    assert layout is not None
    assert layout.phone_number == "0823456789"


def test_cost_from_second_to_last_column_when_zip_missing():
    layout = read_column_layout(["JN123456789TH", "Nok", "0823456789", "52", "รับฝาก"], "JN123456789TH")
    assert layout is not None
    assert layout.shipping_cost == 52.0
    assert layout.status == "รับฝาก"


def test_last_column_date_sets_import_date_and_status():
    layout = read_column_layout(
        ["JN123456789TH", "Nok", "0823456789", "10110", "45", "Delivered", "2026-01-20"],
        "JN123456789TH",
    )
    assert layout is not None
    assert layout.import_date == date(2026, 1, 20)
    assert layout.status == "Delivered"
    assert layout.shipping_cost == 45.0


def test_consumed_last_column_is_not_a_status():
    layout = read_column_layout(["1", "JN123456789TH", "Somchai", "081-234-5678", "10110"], "JN123456789TH")
    assert layout is not None
    assert layout.status == DEFAULT_STATUS
    assert layout.shipping_cost is None


def test_cod_text_is_not_a_status():
    layout = read_column_layout(["JN123456789TH", "Nok", "0823456789", "COD 590"], "JN123456789TH")
    assert layout is not None
    assert layout.status == DEFAULT_STATUS


def test_empty_cells_do_not_shift_positions():
    row = ["EF582568151TH", "", "718.", "1,250", "Somchai Jaidee", "", "0812345678", "10110", "45", "รับฝาก"]
    assert read_column_layout(row, "EF582568151TH") == read_column_layout(EXPORT_ROW, "EF582568151TH")


def test_no_layout_without_phone_after_tracking():
    assert read_column_layout(["0812345678", "Somchai", "JN123456789TH"], "JN123456789TH") is None
    assert read_column_layout(["2", "#70\nSomchai\n0891234567", "EF582568151TH"], "EF582568151TH") is None
    assert read_column_layout(["a", "b"], "JN123456789TH") is None
