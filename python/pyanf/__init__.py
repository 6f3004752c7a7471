"""
pyanf - Fast Boolean Algebraic Normal Form (ANF) Transform

Computes the ANF coefficient table of a Boolean function (for example a
cellular automaton update rule) from its truth table with the in-place XOR
butterfly over GF(2). Truth tables can be bit-packed into an unsigned
integer or given as an explicit boolean sequence / NumPy array.

Basic Usage:
    >>> import numpy as np
    >>> import pyanf
    >>> pyanf.transform_packed(np.uint8(30), 3)  # Elementary CA rule 30
    np.uint8(30)
    >>> table = [False, True, False, False]
    >>> pyanf.transform_array(table)  # In-place transform
    >>> print(table)
    [False, True, False, True]

Copyright (C) 2025 Hosein Hadipour
License: GPL-3.0-or-later
"""

from ._version import __version__
from . import _pyanf
from ._pyanf import (
    Backend,
    Config,
    ANFError,
    OutOfDomainError,
    InsufficientCapacityError,
    InvalidLengthError,
    InvalidEntryError,
    is_power_of_2,
    log2,
    recommend_backend,
    backend_name,
    version,
    default_config,
)

import numpy as np
import warnings
import os
from collections.abc import MutableSequence
from typing import Optional, Union, Any

# Global flag for the unchecked-path warning (shown only once)
_unchecked_warning_shown = False

__all__ = [
    '__version__',
    'Backend',
    'Config',
    'Context',
    'ANFError',
    'OutOfDomainError',
    'InsufficientCapacityError',
    'InvalidLengthError',
    'InvalidEntryError',
    'transform_packed',
    'transform_packed_unchecked',
    'transform_array',
    'transform_array_unchecked',
    'transform_packed_batch',
    'compute',
    'from_rule',
    'pack_table',
    'unpack_table',
    'is_power_of_2',
    'log2',
    'recommend_backend',
    'backend_name',
    'version',
    'default_config',
]


def _warn_unchecked():
    """
    Show one-time warning about the unchecked fast path.
    Can be suppressed with PYANF_SILENCE_UNCHECKED_WARNING=1 environment variable.
    """
    global _unchecked_warning_shown

    if _unchecked_warning_shown:
        return

    if os.environ.get('PYANF_SILENCE_UNCHECKED_WARNING') == '1':
        _unchecked_warning_shown = True
        return

    warnings.warn(
        "Unchecked ANF transform: truth table length, integer width and rule "
        "range are not validated. Invalid input gives undefined results. "
        "Set PYANF_SILENCE_UNCHECKED_WARNING=1 to suppress this warning.",
        UserWarning,
        stacklevel=3
    )

    _unchecked_warning_shown = True


def _resolve_backend(backend: Optional[Union[Backend, str]]) -> Backend:
    if backend is None:
        return Backend.AUTO
    if isinstance(backend, Backend):
        return backend
    if isinstance(backend, str):
        name = backend.strip().lower()
        mapping = {
            'auto': Backend.AUTO,
            'scalar': Backend.SCALAR,
            'bitsliced': Backend.BITSLICED,
        }
        if name not in mapping:
            raise ValueError(
                f"Unknown backend string '{backend}'. Expected one of: auto,scalar,bitsliced"
            )
        return mapping[name]
    raise TypeError(f"backend must be a Backend or str, got {type(backend).__name__}")


def _num_variables(num_variables: Any) -> int:
    if isinstance(num_variables, bool) or not isinstance(num_variables, (int, np.integer)):
        raise TypeError("num_variables must be an integer")
    if num_variables < 0:
        raise ValueError("num_variables must be non-negative")
    return int(num_variables)


def _unpack_rule(rule_value: Any, width: Optional[int]):
    """
    Split a packed rule into (Python int, bit width, result type).

    NumPy unsigned scalars carry their own width; Python ints are unbounded
    unless ``width`` is given.
    """
    if isinstance(rule_value, (bool, np.bool_)):
        raise TypeError("Rule value must be an unsigned integer, not bool")

    if isinstance(rule_value, np.unsignedinteger):
        dtype_width = rule_value.dtype.itemsize * 8
        if width is not None and width != dtype_width:
            raise ValueError(
                f"width={width} conflicts with {rule_value.dtype} ({dtype_width} bits)"
            )
        return int(rule_value), dtype_width, type(rule_value)

    if isinstance(rule_value, np.integer):
        raise TypeError(f"Rule value must be unsigned, got {rule_value.dtype}")

    if isinstance(rule_value, int):
        if width is not None and (isinstance(width, bool) or not isinstance(width, int) or width <= 0):
            raise ValueError("width must be a positive integer")
        return rule_value, width, int

    raise TypeError(
        f"Unsupported rule type: {type(rule_value).__name__}. "
        "Supported types: int, numpy.uint8/16/32/64"
    )


def _packed_dispatch(value: int, num_variables: int, backend: Backend) -> int:
    if backend == Backend.SCALAR:
        return _pyanf.anf_packed_scalar(value, num_variables)
    return _pyanf.anf_packed_bitsliced(value, num_variables)


def _check_table_type(table: Any) -> None:
    if isinstance(table, np.ndarray):
        if table.ndim != 1:
            raise ValueError("Input must be 1-dimensional")
        if not table.flags.writeable:
            raise ValueError("Input array is read-only")
        if table.dtype != np.bool_ and not np.issubdtype(table.dtype, np.integer):
            raise TypeError(
                f"Unsupported dtype: {table.dtype}. "
                "Supported types: bool, integer (0/1 entries)"
            )
    elif not isinstance(table, MutableSequence):
        raise TypeError(
            "Truth table must be a mutable sequence (e.g. list) or a NumPy array"
        )


def _array_dispatch(table: Any, num_variables: int, backend: Backend) -> None:
    if backend == Backend.AUTO:
        backend = recommend_backend(table)
    if backend == Backend.BITSLICED and isinstance(table, np.ndarray):
        _pyanf.anf_array_bitsliced(table, num_variables)
    else:
        _pyanf.anf_array_scalar(table, num_variables)


def transform_packed(
    rule_value: Any,
    num_variables: int,
    width: Optional[int] = None,
    backend: Optional[Union[Backend, str]] = None
) -> Any:
    """
    ANF transform of a bit-packed truth table (checked).

    Parameters
    ----------
    rule_value : int or numpy unsigned integer
        Truth table with bit i holding the output on input assignment i.
        NumPy scalars (uint8, uint16, uint32, uint64) carry a fixed width;
        Python ints are unbounded unless ``width`` is given.
    num_variables : int
        Number of variables n of the Boolean function.
    width : int, optional
        Bit width to enforce for a Python int rule value.
    backend : Backend or str, optional
        'auto', 'scalar' or 'bitsliced'. If None, uses AUTO.

    Returns
    -------
    int or numpy unsigned integer
        ANF coefficient table, same type as ``rule_value``. Bit i is the
        coefficient of the monomial of the variables set in i.

    Raises
    ------
    InsufficientCapacityError
        If the integer width is smaller than 2^n.
    OutOfDomainError
        If rule_value >= 2^(2^n) or is negative.
    TypeError
        If rule_value is not an unsigned integer.

    Examples
    --------
    >>> import pyanf
    >>> pyanf.transform_packed(3, 2)  # rule 3: 1 ^ x1
    5
    >>> pyanf.transform_packed(240, 3)  # rule 240: x2
    16
    """
    n = _num_variables(num_variables)
    value, bits, result_type = _unpack_rule(rule_value, width)
    backend = _resolve_backend(backend)

    _pyanf.check_packed(value, n, bits)

    return result_type(_packed_dispatch(value, n, backend))


def transform_packed_unchecked(
    rule_value: Any,
    num_variables: int,
    width: Optional[int] = None,
    backend: Optional[Union[Backend, str]] = None
) -> Any:
    """
    ANF transform of a bit-packed truth table without range checks.

    Same as transform_packed() but the capacity and domain preconditions
    are not verified. The result is undefined if rule_value has bits set at
    or above 2^n or the integer width is smaller than 2^n; it is truncated
    to the width of fixed-width types.

    See Also
    --------
    transform_packed : Checked version with full documentation
    """
    n = _num_variables(num_variables)
    value, bits, result_type = _unpack_rule(rule_value, width)
    backend = _resolve_backend(backend)

    _warn_unchecked()

    result = _packed_dispatch(value, n, backend)
    if bits is not None:
        result &= (1 << bits) - 1
    return result_type(result)


def transform_array(
    table: Any,
    backend: Optional[Union[Backend, str]] = None
) -> None:
    """
    In-place ANF transform of an explicit truth table (checked).

    Parameters
    ----------
    table : list of bool or np.ndarray
        Mutable sequence, element i is the output on input assignment i.
        NumPy arrays must be 1-D with dtype bool or an integer dtype
        holding 0/1. Length must be a power of 2.
        Modified in-place.
    backend : Backend or str, optional
        'auto', 'scalar' or 'bitsliced'. If None, uses AUTO
        (vectorized for NumPy arrays, element loop for lists).

    Raises
    ------
    InvalidLengthError
        If length is not a power of 2.
    InvalidEntryError
        If an entry is not 0/1 (True/False).
    TypeError
        If table is not a mutable sequence or has an unsupported dtype.
    ValueError
        If a NumPy array is not 1-D or is read-only.

    All checks run before the first write, so on failure ``table`` is left
    unchanged.

    Examples
    --------
    >>> import pyanf
    >>> table = [True, True, True, True]
    >>> pyanf.transform_array(table)
    >>> print(table)
    [True, False, False, False]
    """
    _check_table_type(table)
    backend = _resolve_backend(backend)

    n = _pyanf.check_table(table)

    _array_dispatch(table, n, backend)


def transform_array_unchecked(
    table: Any,
    backend: Optional[Union[Backend, str]] = None
) -> None:
    """
    In-place ANF transform without length or entry validation.

    The number of variables is taken from the trailing-zero count of the
    length, so only the leading 2^n elements are transformed when the length
    is not a power of 2. The result is undefined on such input.

    See Also
    --------
    transform_array : Checked version with full documentation
    """
    _check_table_type(table)
    backend = _resolve_backend(backend)

    _warn_unchecked()

    n = _pyanf.trailing_zeros(len(table))
    _array_dispatch(table, n, backend)


def transform_packed_batch(values: np.ndarray, num_variables: int) -> np.ndarray:
    """
    ANF transform of many packed truth tables at once.

    Parameters
    ----------
    values : np.ndarray
        1-D array of uint8, uint16, uint32 or uint64, one packed truth
        table per element.
    num_variables : int
        Number of variables n shared by all tables (2^n <= dtype width).

    Returns
    -------
    np.ndarray
        New array of the same dtype holding the ANF coefficient tables.

    Examples
    --------
    >>> import numpy as np
    >>> import pyanf
    >>> rules = np.arange(256, dtype=np.uint8)  # all elementary CA rules
    >>> anf = pyanf.transform_packed_batch(rules, 3)
    >>> int(anf[30]), int(anf[240])
    (30, 16)
    """
    if not isinstance(values, np.ndarray):
        raise TypeError("Input must be a NumPy array")

    if values.ndim != 1:
        raise ValueError("Input must be 1-dimensional")

    if not np.issubdtype(values.dtype, np.unsignedinteger):
        raise TypeError(
            f"Unsupported dtype: {values.dtype}. "
            "Supported types: uint8, uint16, uint32, uint64"
        )

    n = _num_variables(num_variables)
    width = values.dtype.itemsize * 8
    size = 1 << n
    if width < size:
        raise InsufficientCapacityError(
            f"A {width}-bit integer cannot hold the {size}-entry truth table "
            f"of a {n}-variable function; use a wider type"
        )
    if size < width and values.size and int(values.max()) >> size:
        raise OutOfDomainError(
            f"Rule values must satisfy 0 <= value < 2^(2^{n})"
        )

    return _pyanf.anf_packed_batch(values, n)


def compute(
    table: Any,
    backend: Optional[Union[Backend, str]] = None
) -> np.ndarray:
    """
    Out-of-place ANF transform.

    Parameters
    ----------
    table : sequence of bool or np.ndarray
        Truth table of power-of-2 length. Input is not modified.
    backend : Backend or str, optional
        Backend selection. If None, uses AUTO.

    Returns
    -------
    np.ndarray
        New bool array holding the ANF coefficient table.

    Examples
    --------
    >>> import pyanf
    >>> original = [False, True, False, False]
    >>> pyanf.compute(original)
    array([False,  True, False,  True])
    >>> original  # Unchanged
    [False, True, False, False]
    """
    data = np.asarray(table)
    if data.size == 0:
        data = data.astype(np.bool_)
    if data.dtype != np.bool_ and not np.issubdtype(data.dtype, np.integer):
        raise TypeError(
            f"Unsupported dtype: {data.dtype}. "
            "Supported types: bool, integer (0/1 entries)"
        )
    if data.ndim != 1:
        raise ValueError("Input must be 1-dimensional")

    # Validate entries before the bool cast hides values other than 0/1
    _pyanf.check_table(data)

    result = data.astype(np.bool_)
    transform_array(result, backend)
    return result


def from_rule(rule_number: Any, num_variables: int) -> np.ndarray:
    """
    ANF coefficient table of a packed rule, returned unpacked.

    Parameters
    ----------
    rule_number : int or numpy unsigned integer
        Packed truth table (e.g. Wolfram code of an elementary CA rule).
    num_variables : int
        Number of variables n.

    Returns
    -------
    np.ndarray
        Bool array of length 2^n; element i is the coefficient of the
        monomial of the variables set in i.

    Examples
    --------
    >>> import pyanf
    >>> pyanf.from_rule(90, 3)  # rule 90: x0 ^ x2
    array([False,  True, False, False,  True, False, False, False])
    """
    n = _num_variables(num_variables)
    return unpack_table(transform_packed(rule_number, n), n)


def pack_table(table: Any) -> int:
    """
    Pack an explicit truth table into an integer (element i -> bit i).

    Parameters
    ----------
    table : sequence of bool or np.ndarray
        Truth table of power-of-2 length.

    Returns
    -------
    int
        Packed truth table as a Python int.

    Examples
    --------
    >>> import pyanf
    >>> pyanf.pack_table([False, True, True, True, True, False, False, False])
    30
    """
    data = np.asarray(table)
    if data.ndim != 1:
        raise ValueError("Input must be 1-dimensional")
    _pyanf.check_table(data)

    value = 0
    for i in np.flatnonzero(data):
        value |= 1 << int(i)
    return value


def unpack_table(value: Any, num_variables: int) -> np.ndarray:
    """
    Unpack an integer truth table into a bool array of length 2^n.

    Raises
    ------
    OutOfDomainError
        If value >= 2^(2^n).
    """
    n = _num_variables(num_variables)
    rule, bits, _ = _unpack_rule(value, None)
    _pyanf.check_packed(rule, n, bits)

    size = 1 << n
    return np.array([(rule >> i) & 1 for i in range(size)], dtype=np.bool_)


class Context:
    """
    ANF computation context carrying a backend and a validation mode.

    Parameters
    ----------
    backend : Backend or str, optional
        Backend selection. Default: AUTO
    checked : bool, optional
        Validate inputs before transforming. Default: True.
        With False, calls go to the unchecked entry points.

    Examples
    --------
    >>> import pyanf
    >>>
    >>> # Context manager (automatic cleanup)
    >>> with pyanf.Context(backend='bitsliced') as ctx:
    ...     anf = ctx.transform_packed(110, 3)
    ...     table = [False, True, True, False]
    ...     ctx.transform_array(table)
    >>>
    >>> # Manual management
    >>> ctx = pyanf.Context(checked=False)
    >>> ctx.transform_packed(30, 3)
    >>> ctx.close()
    """

    def __init__(
        self,
        backend: Union[Backend, str] = Backend.AUTO,
        checked: bool = True
    ):
        self.config = Config(backend=_resolve_backend(backend), checked=checked)
        self._closed = False

    def transform_packed(
        self,
        rule_value: Any,
        num_variables: int,
        width: Optional[int] = None
    ) -> Any:
        """Packed transform using this context's backend and mode."""
        if self._closed:
            raise RuntimeError("Context is closed")

        if self.config.checked:
            return transform_packed(rule_value, num_variables, width, self.config.backend)
        return transform_packed_unchecked(rule_value, num_variables, width, self.config.backend)

    def transform_array(self, table: Any) -> None:
        """In-place array transform using this context's backend and mode."""
        if self._closed:
            raise RuntimeError("Context is closed")

        if self.config.checked:
            transform_array(table, self.config.backend)
        else:
            transform_array_unchecked(table, self.config.backend)

    def close(self) -> None:
        """Mark the context as closed; further transforms raise RuntimeError."""
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
