"""Tests for the matrix, GCD and radix primitives."""

import pytest

from numeric_ops import (
    conversion_steps,
    convert_base,
    determinant,
    determinant_2x2,
    determinant_3x3,
    gcd,
    gcd_steps,
    matrix_add,
    matrix_multiply,
    parse_base,
)


class TestMatrixOps:
    """Tests for matrix addition and product."""

    def test_add_is_element_wise(self):
        """Should add matching cells."""
        assert matrix_add([[1, 2], [3, 4]], [[10, 20], [30, 40]]) == [[11, 22], [33, 44]]

    def test_add_rejects_mismatched_dimensions(self):
        """Should raise ValueError when shapes differ."""
        with pytest.raises(ValueError):
            matrix_add([[1, 2]], [[1], [2]])

    def test_multiply_square(self):
        """Should compute the standard product."""
        a = [[1, 2], [3, 4]]
        b = [[5, 6], [7, 8]]
        assert matrix_multiply(a, b) == [[19, 22], [43, 50]]

    def test_multiply_result_dimensions(self):
        """Should produce rows(a) x cols(b) with dot-product cells."""
        a = [[1, 2, 3], [4, 5, 6]]  # 2x3
        b = [[1, 0], [0, 1], [1, 1]]  # 3x2
        result = matrix_multiply(a, b)
        assert len(result) == 2
        assert all(len(row) == 2 for row in result)
        for i in range(2):
            for j in range(2):
                assert result[i][j] == sum(a[i][k] * b[k][j] for k in range(3))

    def test_multiply_rejects_inner_dimension_mismatch(self):
        """Should raise ValueError when cols(a) != rows(b)."""
        with pytest.raises(ValueError):
            matrix_multiply([[1, 2]], [[1, 2]])


class TestDeterminant:
    """Tests for 2x2 and 3x3 determinants."""

    def test_2x2(self):
        assert determinant_2x2([[3, 8], [4, 6]]) == -14

    def test_3x3_cofactor_expansion(self):
        m = [[6, 1, 1], [4, -2, 5], [2, 8, 7]]
        assert determinant_3x3(m) == -306

    def test_3x3_identity(self):
        assert determinant_3x3([[1, 0, 0], [0, 1, 0], [0, 0, 1]]) == 1

    def test_dispatch_by_size(self):
        """Should route to the right formula by matrix size."""
        assert determinant([[3, 8], [4, 6]]) == -14
        assert determinant([[6, 1, 1], [4, -2, 5], [2, 8, 7]]) == -306

    def test_dispatch_rejects_unsupported_sizes(self):
        """Should raise ValueError for non-square or 4x4 matrices."""
        with pytest.raises(ValueError):
            determinant([[1, 2, 3], [4, 5, 6]])
        with pytest.raises(ValueError):
            determinant([[1, 0, 0, 0]] * 4)


class TestGcd:
    """Tests for the Euclidean GCD."""

    def test_known_value(self):
        assert gcd(48, 18) == 6

    def test_symmetric(self):
        """gcd(a, b) should equal gcd(b, a)."""
        for a, b in [(12, 18), (17, 5), (100, 75), (-24, 36)]:
            assert gcd(a, b) == gcd(b, a)

    def test_zero_operand(self):
        """gcd(a, 0) should be |a| and gcd(0, 0) should be 0."""
        assert gcd(7, 0) == 7
        assert gcd(-7, 0) == 7
        assert gcd(0, 0) == 0

    def test_never_negative(self):
        assert gcd(-12, -18) == 6

    def test_steps_trace_euclid(self):
        """Should list each division then the result."""
        assert gcd_steps(48, 18) == [
            "48 = 18 × 2 + 12",
            "18 = 12 × 1 + 6",
            "12 = 6 × 2 + 0",
            "PGCD = 6",
        ]


class TestBaseConversion:
    """Tests for radix conversion and the division trace."""

    def test_convert_binary(self):
        assert convert_base(10, 2) == "1010"

    def test_convert_hex_uppercase(self):
        """Should use uppercase digits above 9."""
        assert convert_base(255, 16) == "FF"
        assert convert_base(171, 16) == "AB"

    def test_convert_zero(self):
        assert convert_base(0, 2) == "0"
        assert convert_base(0, 16) == "0"

    def test_convert_negative_keeps_sign(self):
        assert convert_base(-10, 2) == "-1010"

    def test_convert_rejects_bad_base(self):
        """Should raise ValueError outside 2-16."""
        with pytest.raises(ValueError):
            convert_base(10, 1)
        with pytest.raises(ValueError):
            convert_base(10, 17)

    def test_round_trip(self):
        """Parsing the output in the target base should give back n."""
        for base in range(2, 17):
            for n in range(0, 300):
                assert parse_base(convert_base(n, base), base) == n

    def test_parse_rejects_invalid_digit(self):
        with pytest.raises(ValueError):
            parse_base("12", 2)

    def test_steps_binary(self):
        """Should list each division with its remainder, then the result."""
        assert conversion_steps(10, 2) == [
            "10 ÷ 2 = 5 reste 0",
            "5 ÷ 2 = 2 reste 1",
            "2 ÷ 2 = 1 reste 0",
            "1 ÷ 2 = 0 reste 1",
            "Résultat : 1010",
        ]

    def test_steps_hex_digits(self):
        assert conversion_steps(255, 16) == [
            "255 ÷ 16 = 15 reste F",
            "15 ÷ 16 = 0 reste F",
            "Résultat : FF",
        ]

    def test_steps_zero(self):
        assert conversion_steps(0, 2) == ["0 = 0"]

    def test_steps_invalid_input(self):
        """Negative and NaN input should yield a single invalid entry."""
        assert conversion_steps(-5, 2) == ["Valeur invalide"]
        assert conversion_steps(float("nan"), 2) == ["Valeur invalide"]

    def test_steps_are_restartable(self):
        """The trace is a list and can be iterated more than once."""
        steps = conversion_steps(42, 8)
        assert list(steps) == list(steps)
        assert steps[-1] == "Résultat : 52"
