"""
Basic usage examples for pyanf package.

This file demonstrates the main features of the pyanf library.
"""
import numpy as np
import pyanf

print("=" * 70)
print("pyanf - Fast Boolean ANF Transform for Python")
print("=" * 70)
print()

# ============================================================================
# Example 1: Packed truth table
# ============================================================================
print("Example 1: Packed truth table (elementary CA rule 30)")
print("-" * 70)

rule = 30
anf = pyanf.transform_packed(rule, 3)
print(f"Rule {rule:3d}: truth table {rule:08b}")
print(f"ANF:      coefficients {anf:08b}")

# Involution: applying the transform twice gives back the rule
print(f"Twice:    {pyanf.transform_packed(anf, 3)} (should be {rule})")
print()

# ============================================================================
# Example 2: In-place explicit table
# ============================================================================
print("Example 2: In-place explicit table")
print("-" * 70)

table = [False, True, False, False]
print(f"Truth table: {table}")
pyanf.transform_array(table)
print(f"After ANF:   {table}  (x0 ^ x0.x1)")

data = np.zeros(16, dtype=bool)
data[[3, 5, 6, 9, 10, 12]] = True
pyanf.transform_array(data)
print(f"NumPy table -> monomial indices {np.flatnonzero(data).tolist()}")
print()

# ============================================================================
# Example 3: Fixed-width integer types
# ============================================================================
print("Example 3: Fixed-width integer types")
print("-" * 70)

for dtype, n in [(np.uint8, 3), (np.uint16, 4), (np.uint32, 5), (np.uint64, 6)]:
    value = dtype((1 << (1 << n)) - 1)  # constant-one function
    result = pyanf.transform_packed(value, n)
    print(f"{np.dtype(dtype).name:>6} n={n}: {type(result).__name__} {int(result)}")

try:
    pyanf.transform_packed(np.uint16(16), 5)
except pyanf.InsufficientCapacityError as e:
    print(f"✓ Capacity check: {e}")

try:
    pyanf.transform_packed(16, 2)
except pyanf.OutOfDomainError as e:
    print(f"✓ Domain check: {e}")
print()

# ============================================================================
# Example 4: Backend selection
# ============================================================================
print("Example 4: Backend selection")
print("-" * 70)

table = np.random.default_rng(0).integers(0, 2, 256).astype(bool)
for backend in (pyanf.Backend.SCALAR, pyanf.Backend.BITSLICED):
    result = table.copy()
    pyanf.transform_array(result, backend=backend)
    print(f"✓ {pyanf.backend_name(backend)} backend: {int(result.sum())} monomials")

recommended = pyanf.recommend_backend(table)
print(f"Recommended backend for a NumPy table: {pyanf.backend_name(recommended)}")
print()

# ============================================================================
# Example 5: Context API
# ============================================================================
print("Example 5: Context API")
print("-" * 70)

with pyanf.Context(backend='bitsliced') as ctx:
    anfs = [ctx.transform_packed(r, 3) for r in (30, 90, 110, 184)]
    print(f"✓ ANF of rules 30, 90, 110, 184: {anfs}")
print()

# ============================================================================
# Summary
# ============================================================================
print("=" * 70)
print(f"pyanf version: {pyanf.__version__}")
print("=" * 70)
