import pytest

from payrecon.errors import ValidationError
from payrecon.services.text import fingerprint, normalize


def test_normalize_lowercases_and_collapses_whitespace():
    assert normalize("  Transferencia\n\tEXITOSA   Importe ") == "transferencia exitosa importe"


def test_fingerprint_ignores_case_and_whitespace_layout():
    a = fingerprint("Importe $ 1.000\nCBU 123")
    b = fingerprint("  importe   $ 1.000 cbu 123 ")
    assert a == b
    assert len(a) == 64
    int(a, 16)


def test_near_identical_text_is_a_different_fingerprint():
    assert fingerprint("importe $1.000") != fingerprint("importe $ 1.000")


@pytest.mark.parametrize("value", ["", "   \n ", None, 123, b"bytes"])
def test_fingerprint_rejects_empty_or_non_text(value):
    with pytest.raises(ValidationError):
        fingerprint(value)
