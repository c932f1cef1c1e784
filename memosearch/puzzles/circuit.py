"""
Circuit: wires carrying 16-bit signals, driven by constants or by gates over
other wires. Wires may be listed in any order, so each wire's signal is resolved
on demand and memoized.

    123 -> x
    x AND y -> d
    NOT x -> h
    x LSHIFT 2 -> f
"""
from dataclasses import dataclass
from typing import Mapping

from frozendict import frozendict

from memosearch.misc.ops import Op, evaluate, op_from_token
from memosearch.search.memo import memoized

Operand = int | str  # A constant signal or a wire name.


@dataclass(frozen=True)
class Gate:
    op: Op | None
    operands: tuple[Operand, ...]


Circuit = frozendict[str, Gate]


def _operand(token: str) -> Operand:
    return int(token) if token.isdigit() else token


def parse_gate(expr: str) -> Gate:
    """
    >>> parse_gate("x LSHIFT 2")
    Gate(op=<Op.LSHIFT: 'lshift'>, operands=('x', 2))
    >>> parse_gate("NOT y")
    Gate(op=<Op.NOT: 'not'>, operands=('y',))
    >>> parse_gate("123")
    Gate(op=None, operands=(123,))
    """
    tokens = expr.split()
    if len(tokens) == 1:
        return Gate(None, (_operand(tokens[0]),))
    elif len(tokens) == 2:
        return Gate(op_from_token(tokens[0]), (_operand(tokens[1]),))
    elif len(tokens) == 3:
        return Gate(op_from_token(tokens[1]), (_operand(tokens[0]), _operand(tokens[2])))

    raise ValueError(f"Can't parse gate {expr!r}.")


def parse_circuit(text: str) -> Circuit:
    gates = {}
    for line in text.strip().splitlines():
        expr, arrow, wire = line.partition("->")
        if not arrow:
            raise ValueError(f"Expected 'expr -> wire', got {line!r}.")
        gates[wire.strip()] = parse_gate(expr)
    return frozendict(gates)


def wire_signals(
    circuit: Circuit,
    bits: int = 16,
    overrides: Mapping[str, int] | None = None,
) -> dict[str, int]:
    """
    Resolve every wire's signal. Overridden wires ignore their gate.
    """
    overrides = frozendict(overrides or {})

    @memoized()
    def signal(operand: Operand) -> int:
        if isinstance(operand, int):
            return operand
        if operand in overrides:
            return overrides[operand]
        if operand not in circuit:
            raise KeyError(f"Wire {operand!r} has no driver.")

        gate = circuit[operand]
        values = [signal(input_operand) for input_operand in gate.operands]
        if gate.op is None:
            return values[0]
        return evaluate(gate.op, *values, bits=bits)

    return {wire: signal(wire) for wire in sorted(circuit)}


def wire_signal(
    circuit: Circuit,
    wire: str,
    bits: int = 16,
    overrides: Mapping[str, int] | None = None,
) -> int:
    return wire_signals(circuit, bits, overrides)[wire]
