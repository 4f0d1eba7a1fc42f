import math
import struct

import pytest

from tinyprintf.ftoa import ftoa
from tinyprintf.spec import FormatSpec

MAN_BITS = 52
EXP_MASK = 0x7FF
Z80 = "0" * 80
SUB_HEAD = "0." + "0" * 78


def make_spec(prec=0, alt_form=False, uppercase=True):
    return FormatSpec(prec=prec, alt_form=alt_form, uppercase=uppercase)


def from_bits(bits):
    return struct.unpack("<d", struct.pack("<Q", bits))[0]


# ---- default configuration: 32-bit mantissa, 23-byte buffer ----


@pytest.mark.parametrize(
    "expected, value",
    [
        ("NAN", math.nan),
        ("NAN", -math.nan),
        ("INF", math.inf),
        ("INF", -math.inf),
        ("ERR", 1.7976931348623157e308),
    ],
)
def test_special_values(expected, value):
    assert ftoa(make_spec(), value) == expected


def test_precision_too_large_for_buffer():
    assert ftoa(make_spec(prec=21), 10.0) == "ERR"
    assert ftoa(make_spec(prec=22), 9.0) == "ERR"
    assert ftoa(make_spec(prec=22, uppercase=False), 0.0) == "err"


def test_lowercase_special_values():
    assert ftoa(make_spec(uppercase=False), math.nan) == "nan"
    assert ftoa(make_spec(uppercase=False), math.inf) == "inf"


def test_zero_and_decimal_separator():
    assert ftoa(make_spec(), 0.0) == "0"
    assert ftoa(make_spec(), -0.0) == "0"
    assert ftoa(make_spec(alt_form=True), 0.0) == "0."
    assert ftoa(make_spec(prec=1, alt_form=True), 0.0) == "0.0"


@pytest.mark.parametrize(
    "prec, expected, value",
    [
        (0, "9", 8.5),
        (0, "10", 9.5),
        (0, "49", 48.5),
        (0, "50", 49.5),
        (0, "99", 98.5),
        (0, "100", 99.5),
        (0, "0", 0.40625),
        (0, "1", 0.5),
        (1, "0.3", 0.34375),
        (1, "0.3", 0.25),
        (1, "0.9", 0.9375),
        (1, "1.0", 0.96875),
        (4, "0.9375", 0.9375),
        (4, "0.9688", 0.96875),
    ],
)
def test_rounding(prec, expected, value):
    assert ftoa(make_spec(prec=prec), value) == expected


def test_default_precision_six():
    assert ftoa(make_spec(prec=6), 1.0) == "1.000000"
    assert ftoa(make_spec(prec=6), 0.00390625) == "0.003906"
    assert ftoa(make_spec(prec=8), 0.00390625) == "0.00390625"
    assert ftoa(make_spec(prec=17), 1.5) == "1.50000000000000000"


def test_sign_is_not_printed():
    assert ftoa(make_spec(prec=1), -1.5) == "1.5"


def test_invalid_arguments():
    with pytest.raises(ValueError):
        ftoa(make_spec(), 1.0, buffer_size=22)
    with pytest.raises(ValueError):
        ftoa(make_spec(), 1.0, mantissa_bits=4)
    with pytest.raises(ValueError):
        ftoa(make_spec(prec=-1), 1.0)


# ---- configurable mantissa width with a 512-byte buffer ----


def wide(prec, value, bits):
    return ftoa(make_spec(prec=prec), value, mantissa_bits=bits, buffer_size=512)


@pytest.mark.parametrize(
    "bits, expected",
    [
        (8, ["255.5", "256.0", "260.0", "260.0", "260.0", "270.0"]),
        (16, ["65535.5", "65536.0", "65540.0", "65540.0", "65540.0", "65550.0"]),
        (
            32,
            [
                "4294967295.5",
                "4294967296.0",
                "4294967300.0",
                "4294967300.0",
                "4294967300.0",
                "4294967310.0",
            ],
        ),
    ],
)
def test_integer_overflow(bits, expected):
    top = float((1 << bits) - 1)
    offsets = [0.5, 0.96875, 1.0, 1.5, 9.0, 10.0]
    assert [wide(1, top + off, bits) for off in offsets] == expected


def test_integer_overflow_64():
    assert wide(1, float((1 << 51) - 1) + 0.25, 64) == "2251799813685247.3"
    assert wide(1, float((1 << 51) - 1) + 0.5, 64) == "2251799813685247.5"
    assert wide(1, float((1 << 51) - 1) + 0.75, 64) == "2251799813685247.8"
    assert wide(1, float((1 << 52) - 1) + 0.5, 64) == "4503599627370495.5"
    assert wide(1, float((1 << 53) - 1), 64) == "9007199254740991.0"
    big = (((1 << 64) - 1) << 11) & ((1 << 64) - 1)
    assert wide(1, float(big), 64) == "18446744073709549568.0"


@pytest.mark.parametrize(
    "bits, prec, expected",
    [
        (
            8,
            25,
            [
                "1.0312500000000000000000000",
                "0.9687500000000000000000000",
                "0.6687500000000000000000000",
                "0.0000000000000000000006188",
            ],
        ),
        (
            16,
            27,
            [
                "1.000122070312500000000000000",
                "0.999877929687500000000000000",
                "0.666674804687500000000000000",
                "0.000000000000000000000666479",
            ],
        ),
        (
            32,
            32,
            [
                "1.00000000186264514923095703125000",
                "0.99999999813735485076904296875000",
                "0.66666666679084300994873046875000",
                "0.00000000000000000000066666666493",
            ],
        ),
    ],
)
def test_fraction_accuracy(bits, prec, expected):
    step = 1.0 / (1 << (bits - 3))
    values = [1.0 + step, 1.0 - step, 2.0 / 3.0, 2.0 / 3.0 / 1e21]
    assert [wide(prec, v, bits) for v in values] == expected


def test_fraction_accuracy_64():
    assert wide(56, 1.0 + 1.0 / (1 << 52), 64) == (
        "1.00000000000000022204460492503130808472633361816406250000"
    )
    assert wide(56, 1.0 - 1.0 / (1 << 53), 64) == (
        "0.99999999999999988897769753748434595763683319091796875000"
    )
    assert wide(56, 2.0 / 3.0, 64) == (
        "0.66666666666666662965923251249478198587894439697265625000"
    )
    assert wide(56, 2.0 / 3.0 / 1e21, 64) == (
        "0.00000000000000000000066666666666666663633791789500548930"
    )


LARGEST = from_bits((EXP_MASK << MAN_BITS) - 1)
SMALLEST_NORMAL = from_bits(1 << MAN_BITS)
LARGEST_SUBNORMAL = from_bits((1 << MAN_BITS) - 1)


def test_limits_08():
    assert wide(0, LARGEST, 8) == (
        "16200000000000000000000000000000000000000000000000000000000000000000000000000000"
        + Z80
        + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000"
    )
    normal = (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000009875000000"
    )
    assert wide(318, SMALLEST_NORMAL, 8) == normal
    assert wide(318, LARGEST_SUBNORMAL, 8) == normal
    assert wide(318, from_bits(0x3 << (MAN_BITS - 8)), 8) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000125000000"
    )
    assert wide(318, from_bits(0x2 << (MAN_BITS - 8)), 8) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000077500000"
    )
    assert wide(318, from_bits(0x1 << (MAN_BITS - 8)), 8) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000046875000"
    )


def test_limits_16():
    assert wide(0, LARGEST, 16) == (
        "17858000000000000000000000000000000000000000000000000000000000000000000000000000"
        + Z80
        + Z80
        + "000000000000000000000000000000000000000000000000000000000000000000000"
    )
    normal = (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000022180175781"
        + "2500000000"
    )
    assert wide(328, SMALLEST_NORMAL, 16) == normal
    assert wide(328, LARGEST_SUBNORMAL, 16) == normal
    assert wide(328, from_bits(0x3 << (MAN_BITS - 16)), 16) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000001083007"
        + "8125000000"
    )
    assert wide(328, from_bits(0x2 << (MAN_BITS - 16)), 16) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000000676806"
        + "6406250000"
    )
    assert wide(328, from_bits(0x1 << (MAN_BITS - 16)), 16) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000000405883"
        + "7890625000"
    )


def test_limits_32():
    assert wide(0, LARGEST, 32) == (
        "17976929680000000000000000000000000000000000000000000000000000000000000000000000"
        + Z80
        + Z80
        + "000000000000000000000000000000000000000000000000000000000000000000000"
    )
    normal = (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000022250737510"
        + "6215476989746093750000000000000"
    )
    assert wide(349, SMALLEST_NORMAL, 32) == normal
    assert wide(349, LARGEST_SUBNORMAL, 32) == normal
    assert wide(349, from_bits(0x3 << (MAN_BITS - 32)), 32) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000000000016"
        + "5780913084745407104492187500000"
    )
    assert wide(349, from_bits(0x2 << (MAN_BITS - 32)), 32) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000000000010"
        + "3613070771098136901855468750000"
    )
    assert wide(349, from_bits(0x1 << (MAN_BITS - 32)), 32) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000000000000006"
        + "2167842201888561248779296875000"
    )


def test_limits_64():
    assert wide(0, LARGEST, 64) == (
        "17976931348623156688000000000000000000000000000000000000000000000000000000000000"
        + Z80
        + Z80
        + "000000000000000000000000000000000000000000000000000000000000000000000"
    )
    assert wide(387, SMALLEST_NORMAL, 64) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000022250738585"
        + "072013598145646007253617426613345742225646972656250000000000000000000"
    )
    assert wide(387, LARGEST_SUBNORMAL, 64) == (
        SUB_HEAD + Z80 + Z80
        + "00000000000000000000000000000000000000000000000000000000000000000000022250738585"
        + "072008645510122093469362880568951368331909179687500000000000000000000"
    )
    assert wide(387, from_bits(0x3), 64) == (
        SUB_HEAD + Z80 + Z80 + Z80
        + "000014821969375237396167321879403289131005294620990753173828125000000"
    )
    assert wide(387, from_bits(0x2), 64) == (
        SUB_HEAD + Z80 + Z80 + Z80
        + "000009881312916824930773877777578917402934166602790355682373046875000"
    )
    assert wide(387, from_bits(0x1), 64) == (
        SUB_HEAD + Z80 + Z80 + Z80
        + "000004940656458412465387372569658452903240686282515525817871093750000"
    )