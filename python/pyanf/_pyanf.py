"""
Low-level ANF kernels, validation and configuration types for pyanf.

The public wrappers in ``pyanf/__init__.py`` do type checking and backend
dispatch; everything here assumes its arguments have already been
normalized (Python ``int`` for packed values, a 1-D table for arrays).
"""

import enum
from collections.abc import MutableSequence
from typing import Optional

import numpy as np

from ._version import __version__


class Backend(enum.Enum):
    """Butterfly implementation selector."""
    AUTO = "auto"
    SCALAR = "scalar"
    BITSLICED = "bitsliced"


class Config:
    """Settings shared by a ``Context``: backend choice and validation mode."""

    def __init__(self, backend: Backend = Backend.AUTO, checked: bool = True):
        self.backend = backend
        self.checked = checked

    def __repr__(self) -> str:
        return f"Config(backend={self.backend}, checked={self.checked})"


class ANFError(ValueError):
    """Base class for precondition violations reported by the transforms."""


class OutOfDomainError(ANFError):
    """Packed rule value has bits set at or above position 2^n."""


class InsufficientCapacityError(ANFError):
    """Integer width is smaller than the 2^n bits of the truth table."""


class InvalidLengthError(ANFError):
    """Truth table length is not a power of two."""


class InvalidEntryError(ANFError):
    """Integer truth table holds values other than 0 and 1."""


def is_power_of_2(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def log2(n: int) -> int:
    """Exact base-2 logarithm of a power of two."""
    if not is_power_of_2(n):
        raise InvalidLengthError(
            f"Truth table length must be a power of 2, got {n}"
        )
    return n.bit_length() - 1


def trailing_zeros(n: int) -> int:
    if n == 0:
        return 0
    return (n & -n).bit_length() - 1


def backend_name(backend: Backend) -> str:
    return backend.value


def version() -> str:
    return __version__


def default_config() -> Config:
    return Config()


def recommend_backend(data) -> Backend:
    """Backend AUTO resolves to for ``data`` (packed value or table)."""
    if isinstance(data, MutableSequence):
        return Backend.SCALAR
    return Backend.BITSLICED


# ----------------------------------------------------------------------------
# Precondition checks
# ----------------------------------------------------------------------------

def check_packed(value: int, num_variables: int, width: Optional[int]) -> None:
    size = 1 << num_variables
    if width is not None and width < size:
        raise InsufficientCapacityError(
            f"A {width}-bit integer cannot hold the {size}-entry truth table "
            f"of a {num_variables}-variable function; use a wider type"
        )
    if value < 0 or value >> size:
        raise OutOfDomainError(
            f"Rule value {value} must satisfy 0 <= value < 2^(2^{num_variables})"
        )


def check_table(table) -> int:
    """Validate ``table`` and return its number of variables."""
    num_variables = log2(len(table))
    if isinstance(table, np.ndarray):
        if table.dtype != np.bool_ and table.size and not np.all((table == 0) | (table == 1)):
            raise InvalidEntryError("Truth table entries must be 0 or 1")
    elif any(v != 0 and v != 1 for v in table):
        raise InvalidEntryError("Truth table entries must be 0 or 1")
    return num_variables


# ----------------------------------------------------------------------------
# Packed kernels (Python int in, Python int out)
# ----------------------------------------------------------------------------

def lower_half_mask(num_variables: int, blocksize: int) -> int:
    """
    Bits of a 2^n-entry table whose index has the ``blocksize`` bit clear.

    The pattern is ``blocksize`` ones followed by ``blocksize`` zeros,
    repeated across the table.
    """
    size = 1 << num_variables
    full = (1 << size) - 1
    period = (1 << (blocksize << 1)) - 1
    return full // period * ((1 << blocksize) - 1)


def anf_packed_scalar(value: int, num_variables: int) -> int:
    size = 1 << num_variables
    blocksize = 1
    for _ in range(num_variables):
        for source in range(0, size, blocksize << 1):
            target = source + blocksize
            for i in range(blocksize):
                if (value >> (source + i)) & 1:
                    value ^= 1 << (target + i)
        blocksize <<= 1
    return value


def anf_packed_bitsliced(value: int, num_variables: int) -> int:
    blocksize = 1
    for _ in range(num_variables):
        value ^= (value & lower_half_mask(num_variables, blocksize)) << blocksize
        blocksize <<= 1
    return value


def anf_packed_batch(values: np.ndarray, num_variables: int) -> np.ndarray:
    """Bit-sliced transform of every element of an unsigned integer array."""
    dtype = values.dtype
    result = values.copy()
    blocksize = 1
    for _ in range(num_variables):
        mask = dtype.type(lower_half_mask(num_variables, blocksize))
        result ^= (result & mask) << dtype.type(blocksize)
        blocksize <<= 1
    return result


# ----------------------------------------------------------------------------
# Array kernels (in place)
# ----------------------------------------------------------------------------

def anf_array_scalar(table, num_variables: int) -> None:
    size = 1 << num_variables
    blocksize = 1
    for _ in range(num_variables):
        for source in range(0, size, blocksize << 1):
            target = source + blocksize
            for i in range(blocksize):
                table[target + i] ^= table[source + i]
        blocksize <<= 1


def anf_array_bitsliced(table: np.ndarray, num_variables: int) -> None:
    # A 1-D array always reshapes to a view, so the XOR lands in ``table``.
    size = 1 << num_variables
    blocksize = 1
    for _ in range(num_variables):
        blocks = table[:size].reshape(-1, 2, blocksize)
        blocks[:, 1, :] ^= blocks[:, 0, :]
        blocksize <<= 1
