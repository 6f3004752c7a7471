#!/usr/bin/env python3
"""Print the ANF coefficient tables of cellular automaton rules.

Each rule number is read as a packed truth table (bit i = output on
neighbourhood i) and transformed with pyanf. Output columns give the rule
and its ANF in decimal, hex and binary (most significant bit first).

Example:

    python3 tools/anf_table.py --variables 3 30 90 110
    python3 tools/anf_table.py --variables 2 --all --check-involution

"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Optional


def _ensure_pyanf_importable() -> None:
    py_path = str(Path(__file__).resolve().parent.parent / "python")
    if py_path not in sys.path:
        sys.path.insert(0, py_path)


def format_row(rule: int, anf: int, size: int) -> str:
    digits = max(1, (size + 3) // 4)
    return (
        f"{rule:>12d}  0x{rule:0{digits}x}  {rule:0{size}b}  ->  "
        f"{anf:>12d}  0x{anf:0{digits}x}  {anf:0{size}b}"
    )


def rule_numbers(args: argparse.Namespace) -> Iterable[int]:
    if args.all:
        return range(1 << (1 << args.variables))
    return args.rules


def main(argv: Optional[List[str]] = None) -> int:
    _ensure_pyanf_importable()
    import pyanf

    parser = argparse.ArgumentParser(description="Print ANF coefficient tables of CA rules.")
    parser.add_argument("rules", type=lambda s: int(s, 0), nargs="*",
                        help="Rule numbers (decimal, 0x hex or 0b binary).")
    parser.add_argument("--variables", "-n", type=int, default=3,
                        help="Number of variables of the rule (default: 3, elementary CA).")
    parser.add_argument("--all", action="store_true",
                        help="Transform every rule of the given size (only sensible for n <= 4).")
    parser.add_argument("--backend", type=str, default="auto",
                        choices=["auto", "scalar", "bitsliced"])
    parser.add_argument("--check-involution", action="store_true",
                        help="Verify that transforming the ANF gives back the rule.")
    args = parser.parse_args(argv)

    if not args.all and not args.rules:
        parser.error("give rule numbers or --all")
    if args.all and args.variables > 4:
        parser.error("--all is limited to at most 4 variables")

    size = 1 << args.variables
    failures = 0
    for rule in rule_numbers(args):
        try:
            anf = pyanf.transform_packed(rule, args.variables, backend=args.backend)
        except pyanf.ANFError as exc:
            print(f"{rule}: {exc}", file=sys.stderr)
            failures += 1
            continue

        print(format_row(rule, anf, size))
        if args.check_involution and pyanf.transform_packed(anf, args.variables) != rule:
            print(f"  involution failed for rule {rule}", file=sys.stderr)
            failures += 1

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
