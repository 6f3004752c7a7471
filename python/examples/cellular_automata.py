"""
Cellular automaton rule analysis using pyanf

Demonstrates:
- ANF of the 256 elementary CA rules in one batch call
- Listing the monomials of a rule
- Finding the affine rules (no monomial with two or more variables)
- Radius-2 (5-variable) rules packed into uint32
"""

import numpy as np
import pyanf

# Neighbourhood bit b of the rule index is x_b; for elementary CA x0 is the
# right cell, x1 the centre and x2 the left cell.
VARIABLES = ["x0", "x1", "x2", "x3", "x4"]


def monomial(index: int) -> str:
    if index == 0:
        return "1"
    return ".".join(name for b, name in enumerate(VARIABLES) if index >> b & 1)


def polynomial(anf: int, n: int) -> str:
    terms = [monomial(i) for i in range(1 << n) if anf >> i & 1]
    return " ^ ".join(terms) if terms else "0"


def example_famous_rules():
    print("=" * 70)
    print("Example 1: Famous elementary rules")
    print("=" * 70)
    for rule in (30, 45, 90, 110, 150, 184):
        anf = pyanf.transform_packed(rule, 3)
        print(f"Rule {rule:3d}: {polynomial(anf, 3)}")
    print()


def example_affine_rules():
    print("=" * 70)
    print("Example 2: Affine elementary rules")
    print("=" * 70)
    rules = np.arange(256, dtype=np.uint8)
    anf = pyanf.transform_packed_batch(rules, 3)

    # Monomials 0 (constant), 1, 2, 4 (single variables) only
    affine_mask = np.uint8(0b00010111)
    affine = rules[(anf & ~affine_mask) == 0]
    print(f"{len(affine)} affine rules: {affine.tolist()}")
    print()


def example_radius_two():
    print("=" * 70)
    print("Example 3: Radius-2 rule (5 variables, uint32)")
    print("=" * 70)
    rng = np.random.default_rng(2025)
    rule = np.uint32(rng.integers(0, 1 << 32, dtype=np.uint64))
    anf = pyanf.transform_packed(rule, 5)
    table = pyanf.from_rule(rule, 5)

    print(f"Rule 0x{int(rule):08x} -> ANF 0x{int(anf):08x}")
    print(f"Monomials: {int(table.sum())} of 32")
    assert pyanf.pack_table(table) == int(anf)
    print("✓ Packed and unpacked results match")
    print()


if __name__ == "__main__":
    example_famous_rules()
    example_affine_rules()
    example_radius_two()
