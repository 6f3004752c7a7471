"""
Correctness tests for the pyanf transforms.

Tests:
- Known ANF values for packed rules (2 and 3 variables)
- In-place array transform on lists, bytearrays and NumPy arrays
- Precondition errors and untouched buffers on failure
- Backend consistency (scalar vs bit-sliced)
- Involution, representation equivalence and constant-term properties

Run with: pytest python/tests/test_correctness.py -v
"""

import numpy as np
import pytest

import pyanf


def anf_reference(table):
    """ANF by definition: coefficient u is the XOR of f(x) over all x subset of u."""
    size = len(table)
    return [
        bool(sum(bool(table[x]) for x in range(size) if x & u == x) % 2)
        for u in range(size)
    ]


def bits_of(value, size):
    return [bool((value >> i) & 1) for i in range(size)]


PACKED_N2 = [
    (0, 0), (1, 15), (2, 10), (3, 5), (4, 12), (5, 3), (6, 6), (7, 9),
    (8, 8), (9, 7), (10, 2), (11, 13), (12, 4), (13, 11), (14, 14), (15, 1),
]

ARRAY_N2 = [
    ([False, False, False, False], [False, False, False, False]),
    ([True, False, False, False], [True, True, True, True]),
    ([False, True, False, False], [False, True, False, True]),
    ([True, True, False, False], [True, False, True, False]),
    ([False, False, True, False], [False, False, True, True]),
    ([True, False, True, False], [True, True, False, False]),
    ([False, True, True, False], [False, True, True, False]),
    ([True, True, True, False], [True, False, False, True]),
    ([False, False, False, True], [False, False, False, True]),
    ([True, False, False, True], [True, True, True, False]),
    ([False, True, False, True], [False, True, False, False]),
    ([True, True, False, True], [True, False, True, True]),
    ([False, False, True, True], [False, False, True, False]),
    ([True, False, True, True], [True, True, False, True]),
    ([False, True, True, True], [False, True, True, True]),
    ([True, True, True, True], [True, False, False, False]),
]


class TestPackedTransform:
    """Test the bit-packed transform."""

    @pytest.mark.parametrize("rule,expected", PACKED_N2)
    def test_known_values_two_variables(self, rule, expected):
        assert pyanf.transform_packed(rule, 2) == expected

    def test_known_values_three_variables(self):
        """Rule 240 is x2; rule 30 is its own ANF."""
        assert pyanf.transform_packed(240, 3) == 16
        assert pyanf.transform_packed(30, 3) == 30

    def test_zero_variables(self):
        """Constant functions of no variables are their own ANF."""
        assert pyanf.transform_packed(0, 0) == 0
        assert pyanf.transform_packed(1, 0) == 1

    @pytest.mark.parametrize("dtype,n", [
        (np.uint8, 3),
        (np.uint16, 4),
        (np.uint32, 5),
        (np.uint64, 6),
    ])
    def test_numpy_scalar_type_preserved(self, dtype, n):
        """Result keeps the fixed-width type of the input."""
        rng = np.random.default_rng(n)
        value = int(rng.integers(0, 1 << ((1 << n) - 1), dtype=np.uint64))
        result = pyanf.transform_packed(dtype(value), n)

        assert type(result) is dtype
        assert int(result) == pyanf.transform_packed(value, n)

    def test_full_width_uint64(self):
        """n=6 uses every bit of a uint64."""
        value = np.uint64(0xFFFFFFFFFFFFFFFF)
        result = pyanf.transform_packed(value, 6)
        # Constant-one function: only the constant term survives
        assert result == np.uint64(1)

    def test_python_int_with_width(self):
        assert pyanf.transform_packed(3, 2, width=4) == 5

    def test_large_python_int(self):
        """Python ints are unbounded: 8 variables = 256-bit tables."""
        rng = np.random.default_rng(8)
        table = rng.integers(0, 2, 256).astype(bool)
        value = pyanf.pack_table(table)

        result = pyanf.transform_packed(value, 8)

        assert bits_of(result, 256) == anf_reference(table)

    def test_input_not_modified(self):
        value = np.uint8(30)
        pyanf.transform_packed(value, 3)
        assert value == np.uint8(30)


class TestArrayTransform:
    """Test the in-place explicit-table transform."""

    @pytest.mark.parametrize("table,expected", ARRAY_N2)
    def test_known_values_two_variables(self, table, expected):
        table = list(table)
        pyanf.transform_array(table)
        assert table == expected

    def test_known_values_three_variables(self):
        table = [False, False, False, False, True, True, True, True]  # 240
        pyanf.transform_array(table)
        assert table == [False, False, False, False, True, False, False, False]

        table = [False, True, True, True, True, False, False, False]  # 30
        pyanf.transform_array(table)
        assert table == [False, True, True, True, True, False, False, False]

    def test_all_false_fixed_point(self):
        table = np.zeros(64, dtype=bool)
        pyanf.transform_array(table)
        assert not table.any()

    def test_returns_none_and_mutates_in_place(self):
        table = np.array([True, True, True, True])
        result = pyanf.transform_array(table)

        assert result is None
        np.testing.assert_array_equal(table, [True, False, False, False])

    def test_integer_array(self):
        """0/1 integer arrays are transformed without changing dtype."""
        table = np.array([0, 1, 0, 0], dtype=np.uint8)
        pyanf.transform_array(table)

        assert table.dtype == np.uint8
        np.testing.assert_array_equal(table, [0, 1, 0, 1])

    def test_bytearray(self):
        table = bytearray([1, 1, 1, 1])
        pyanf.transform_array(table)
        assert table == bytearray([1, 0, 0, 0])

    def test_size_1(self):
        """A single-entry table (n=0) is unchanged."""
        table = [True]
        pyanf.transform_array(table)
        assert table == [True]

    def test_strided_view(self):
        """Non-contiguous views are transformed through to the base array."""
        base = np.zeros(16, dtype=bool)
        base[0::2] = [True, False, True, True, False, False, True, False]
        base[1::2] = True
        view = base[0::2]

        pyanf.transform_array(view)

        expected = anf_reference([True, False, True, True, False, False, True, False])
        np.testing.assert_array_equal(base[0::2], expected)
        assert base[1::2].all()


class TestErrors:
    """Test precondition violations."""

    def test_out_of_domain(self):
        with pytest.raises(pyanf.OutOfDomainError):
            pyanf.transform_packed(16, 2)

    def test_out_of_domain_is_value_error(self):
        with pytest.raises(ValueError):
            pyanf.transform_packed(np.uint32(256), 3)

    def test_negative_rule_out_of_domain(self):
        with pytest.raises(pyanf.OutOfDomainError):
            pyanf.transform_packed(-1, 2)

    def test_insufficient_capacity(self):
        """A uint16 cannot hold the 32-entry table of 5 variables."""
        with pytest.raises(pyanf.InsufficientCapacityError):
            pyanf.transform_packed(np.uint16(16), 5)

    def test_insufficient_capacity_with_width(self):
        with pytest.raises(pyanf.InsufficientCapacityError):
            pyanf.transform_packed(3, 5, width=16)

    def test_width_conflicts_with_numpy_type(self):
        with pytest.raises(ValueError, match="conflicts"):
            pyanf.transform_packed(np.uint8(3), 2, width=16)

    @pytest.mark.parametrize("value", [np.int32(3), True, 3.0, "3"])
    def test_rule_type(self, value):
        with pytest.raises(TypeError):
            pyanf.transform_packed(value, 2)

    def test_negative_num_variables(self):
        with pytest.raises(ValueError):
            pyanf.transform_packed(0, -1)

    def test_invalid_length_list_unchanged(self):
        table = [False, False, False, False, True, True, True]
        with pytest.raises(pyanf.InvalidLengthError):
            pyanf.transform_array(table)
        assert table == [False, False, False, False, True, True, True]

    def test_invalid_length_array_unchanged(self):
        table = np.array([1, 1, 1, 1, 1, 1, 1], dtype=bool)
        with pytest.raises(pyanf.InvalidLengthError):
            pyanf.transform_array(table, backend='bitsliced')
        assert table.all()

    def test_empty_table(self):
        with pytest.raises(pyanf.InvalidLengthError):
            pyanf.transform_array([])

    def test_invalid_entries_unchanged(self):
        table = np.array([1, 1, 2, 0], dtype=np.int64)
        with pytest.raises(pyanf.InvalidEntryError):
            pyanf.transform_array(table)
        np.testing.assert_array_equal(table, [1, 1, 2, 0])

    def test_invalid_entries_bytearray_unchanged(self):
        table = bytearray([2, 0, 0, 0])
        with pytest.raises(pyanf.InvalidEntryError):
            pyanf.transform_array(table)
        assert table == bytearray([2, 0, 0, 0])

    def test_invalid_entries_list_unchanged(self):
        table = [True, False, 2, False]
        with pytest.raises(pyanf.InvalidEntryError):
            pyanf.transform_array(table)
        assert table == [True, False, 2, False]

    def test_immutable_sequence(self):
        with pytest.raises(TypeError):
            pyanf.transform_array((True, False))

    def test_unsupported_dtype(self):
        with pytest.raises(TypeError):
            pyanf.transform_array(np.zeros(4, dtype=np.float64))

    def test_multidimensional_array(self):
        with pytest.raises(ValueError):
            pyanf.transform_array(np.zeros((2, 2), dtype=bool))

    def test_read_only_array(self):
        table = np.zeros(4, dtype=bool)
        table.flags.writeable = False
        with pytest.raises(ValueError, match="read-only"):
            pyanf.transform_array(table)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            pyanf.transform_packed(3, 2, backend='gpu')


class TestBackends:
    """Test backend selection and consistency."""

    def test_packed_scalar_vs_bitsliced(self):
        for rule in range(256):
            scalar = pyanf.transform_packed(rule, 3, backend='scalar')
            sliced = pyanf.transform_packed(rule, 3, backend=pyanf.Backend.BITSLICED)
            assert scalar == sliced, f"Mismatch for rule {rule}"

    @pytest.mark.parametrize("n", [1, 4, 7, 10])
    def test_array_scalar_vs_bitsliced(self, n):
        rng = np.random.default_rng(n)
        table = rng.integers(0, 2, 1 << n).astype(bool)

        scalar = table.copy()
        sliced = table.copy()
        pyanf.transform_array(scalar, backend='scalar')
        pyanf.transform_array(sliced, backend='bitsliced')

        np.testing.assert_array_equal(scalar, sliced)

    def test_list_with_bitsliced_backend(self):
        """Plain lists fall back to the element loop."""
        table = [False, True, False, False]
        pyanf.transform_array(table, backend='bitsliced')
        assert table == [False, True, False, True]

    def test_auto_backend(self):
        assert pyanf.transform_packed(110, 3, backend='auto') == pyanf.transform_packed(110, 3)


class TestMathematicalProperties:
    """Test mathematical properties of the ANF transform."""

    def test_matches_definition(self):
        """Every 3-variable rule agrees with the subset-sum definition."""
        for rule in range(256):
            assert bits_of(pyanf.transform_packed(rule, 3), 8) == anf_reference(bits_of(rule, 8))

    def test_involution_packed(self):
        for rule in range(256):
            assert pyanf.transform_packed(pyanf.transform_packed(rule, 3), 3) == rule

        rng = np.random.default_rng(16)
        for value in rng.integers(0, 1 << 16, 200):
            value = np.uint16(value)
            assert pyanf.transform_packed(pyanf.transform_packed(value, 4), 4) == value

    def test_involution_array(self):
        rng = np.random.default_rng(1024)
        table = rng.integers(0, 2, 1024).astype(bool)
        original = table.copy()

        pyanf.transform_array(table)
        pyanf.transform_array(table)

        np.testing.assert_array_equal(table, original)

    def test_representation_equivalence(self):
        """Packed and explicit tables of the same function give the same ANF."""
        for rule in range(256):
            table = bits_of(rule, 8)
            pyanf.transform_array(table)
            assert table == bits_of(pyanf.transform_packed(rule, 3), 8)

        rng = np.random.default_rng(6)
        for _ in range(20):
            table = rng.integers(0, 2, 64).astype(bool)
            packed = pyanf.transform_packed(np.uint64(pyanf.pack_table(table)), 6)
            pyanf.transform_array(table)
            assert bits_of(int(packed), 64) == table.tolist()

    def test_constant_term(self):
        """Coefficient 0 equals the function value on the all-zero input."""
        for rule in range(1 << 16):
            if rule % 97:
                continue
            assert pyanf.transform_packed(rule, 4) & 1 == rule & 1

    def test_constant_term_array(self):
        rng = np.random.default_rng(0)
        for n in range(6):
            for _ in range(10):
                table = rng.integers(0, 2, 1 << n).astype(bool)
                first = table[0]
                pyanf.transform_array(table)
                assert table[0] == first

                listed = table.tolist()
                pyanf.transform_array(listed, backend="scalar")
                assert listed[0] == first


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
