import pytest

from engine.errors import DivisionByZero, ParseError
from engine.rational import Rational


def test_add_fractions():
    assert str(Rational(1, 6).add(Rational(1, 8))) == "7/24"


def test_subtract_fractions():
    assert str(Rational(3, 4).subtract(Rational(1, 4))) == "1/2"


def test_multiply_and_divide():
    assert str(Rational(2, 3).multiply(Rational(3, 4))) == "1/2"
    assert str(Rational(1, 2).divide(Rational(2, 3))) == "3/4"
    assert Rational(1, 2) / Rational(1, 4) == Rational(2)


def test_always_lowest_terms_with_positive_denominator():
    r = Rational(4, -6)
    assert (r.numerator, r.denominator) == (-2, 3)
    z = Rational(0, -7)
    assert (z.numerator, z.denominator) == (0, 1)


def test_display_forms():
    assert str(Rational(3, 5)) == "3/5"
    assert str(Rational(11, 4)) == "2'3/4"
    assert str(Rational(4, 6)) == "2/3"
    assert str(Rational(5, 1)) == "5"
    assert str(Rational(0, 5)) == "0"
    assert str(Rational(10, 3)) == "3'1/3"


def test_display_negative_values_carry_one_sign():
    assert str(Rational(-3, 6)) == "-1/2"
    assert str(Rational(-3, 2)) == "-1'1/2"
    assert str(Rational(-4, 2)) == "-2"


def test_computable_string_keeps_improper_form():
    assert Rational(13, 5).to_computable_string() == "13/5"
    assert Rational(6, 3).to_computable_string() == "2"


def test_zero_denominator_rejected():
    with pytest.raises(DivisionByZero):
        Rational(1, 0)


def test_divide_by_zero_rejected():
    with pytest.raises(DivisionByZero):
        Rational(1, 2).divide(Rational(0))
    with pytest.raises(DivisionByZero):
        Rational(0).reciprocal()


def test_compare_is_three_way():
    assert Rational(1, 3).compare(Rational(1, 2)) == -1
    assert Rational(2, 4).compare(Rational(1, 2)) == 0
    assert Rational(3, 4).compare(Rational(2, 3)) == 1
    assert Rational(1, 3) < Rational(1, 2) <= Rational(2, 4)


def test_from_string_literal_forms():
    assert Rational.from_string("5") == Rational(5)
    assert Rational.from_string("3/5") == Rational(3, 5)
    assert Rational.from_string("2'3/5") == Rational(13, 5)
    assert Rational.from_string(" 7 ") == Rational(7)
    assert Rational.from_string("-1'1/2") == Rational(-3, 2)


@pytest.mark.parametrize("bad", ["", "   ", "abc", "1/", "/2", "2'3", "1/0", "1.5", "3 4"])
def test_from_string_rejects_malformed(bad):
    with pytest.raises(ParseError):
        Rational.from_string(bad)


def test_display_string_parses_back():
    for r in (Rational(7, 24), Rational(29, 8), Rational(-5, 3), Rational(0), Rational(12)):
        assert Rational.from_string(r.to_display_string()) == r


def test_predicates():
    assert Rational(3, 4).is_proper_fraction()
    assert not Rational(0).is_proper_fraction()
    assert not Rational(5, 4).is_proper_fraction()
    assert Rational(8, 4).is_integer()


def test_integer_values_hash_like_ints():
    assert Rational(4, 2) == 2
    assert hash(Rational(4, 2)) == hash(2)
    assert Rational(2) in {2}
    assert len({Rational(1, 2), Rational(2, 4), Rational(3)}) == 2
