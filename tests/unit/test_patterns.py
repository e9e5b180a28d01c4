from __future__ import annotations

import pytest

from shipclip.clip import patterns


@pytest.mark.parametrize(
    "cell",
    ["JN123456789TH", "SP12345678", "TH1234567890123456", "Kerry123456789", "FLASH12345678", "sp12345678x"],
)
def test_courier_tracking_accepts(cell):
    assert patterns.is_courier_tracking(cell)


@pytest.mark.parametrize(
    "cell",
    ["SP1234567", "TH12345678901234567", "XX12345678", "JN1234 5678TH ", "Kerry-12345678", ""],
)
def test_courier_tracking_rejects(cell):
    assert not patterns.is_courier_tracking(cell)


def test_postal_shape_ignores_digit_count():
    assert patterns.is_courier_tracking("JNTH")
    assert patterns.is_courier_tracking("JN12TH")
    assert not patterns.is_courier_tracking("jn12th")


def test_courier_prefixes_are_escaped():
    assert patterns.is_courier_tracking("J.T12345678", ("J.T",))
    assert not patterns.is_courier_tracking("JXT12345678", ("J.T",))


def test_empty_prefix_set_keeps_postal_shape():
    assert not patterns.is_courier_tracking("SP12345678", ())
    assert patterns.is_courier_tracking("JN1TH", ())


@pytest.mark.parametrize("cell,expected", [
    ("ABCDE12345", True),
    ("ABCDE1234567890", True),
    ("ABCDE1234", False),
    ("ABCDE12345678901", False),
    ("abcde12345", False),
    ("ABCDE-12345", False),
])
def test_fallback_tracking(cell, expected):
    assert patterns.is_fallback_tracking(cell) is expected


@pytest.mark.parametrize("cell,expected", [
    ("0812345678", "0812345678"),
    ("081-234-5678", "0812345678"),
    ("(081) 234 5678", "0812345678"),
    ("812345678", None),
    ("08123456789", None),
    ("1812345678", None),
    ("", None),
])
def test_phone_digits_if_column(cell, expected):
    assert patterns.phone_digits_if_column(cell) == expected


def test_find_embedded_phone_is_greedy_to_ten_digits():
    assert patterns.find_embedded_phone("tel:0812345678;") == "0812345678"
    assert patterns.find_embedded_phone("tel:081234567;") == "081234567"
    assert patterns.find_embedded_phone("tel:08123456;") is None


@pytest.mark.parametrize("digits,expected", [
    ("081234567", "0081234567"),
    ("0812345678", "0812345678"),
])
def test_normalize_phone(digits, expected):
    assert patterns.normalize_phone(digits) == expected


def test_is_bio_cell():
    assert patterns.is_bio_cell("Somchai Jaidee\nBangkok 10250")
    assert not patterns.is_bio_cell("Somchai\nBKK")
    assert not patterns.is_bio_cell("Somchai Jaidee Bangkok 10250")
    assert not patterns.is_bio_cell("Somchai Jaidee\nBangkok 10250", min_length=30)


@pytest.mark.parametrize("line,expected", [
    ("A2B1", True),
    ("C12B3 x2", True),
    ("A2C1", False),
    ("a2B1", False),
    ("AB21", False),
])
def test_is_product_code(line, expected):
    assert patterns.is_product_code(line) is expected


@pytest.mark.parametrize("line,expected", [
    ("#70", True),
    ("💢 ด่วน", True),
    ("ยอด COD 590", True),
    ("A2B1", True),
    ("Ab", True),
    ("Somchai", False),
    ("สมชาย", False),
])
def test_is_name_noise_line(line, expected):
    assert patterns.is_name_noise_line(line) is expected


def test_zip_predicates():
    assert patterns.is_zip_cell("10110")
    assert not patterns.is_zip_cell("1011")
    assert not patterns.is_zip_cell("๑๐๑๑๐")
    assert patterns.find_embedded_zip("Bangkok 10250\n0812345678") == "10250"
    assert patterns.find_embedded_zip("Bangkok 102500") is None
