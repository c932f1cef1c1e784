"""
Ops: a closed set of integer operations, evaluated by one function.

Puzzle instructions name these as strings ("AND", "LSHIFT", "mul", "eql");
parse them once with op_from_token() rather than comparing strings everywhere.
"""
from enum import Enum


class Op(Enum):
    ADD = "add"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    EQL = "eql"
    AND = "and"
    OR = "or"
    LSHIFT = "lshift"
    RSHIFT = "rshift"
    NOT = "not"

    @property
    def arity(self) -> int:
        return 1 if self is Op.NOT else 2


def op_from_token(token: str) -> Op:
    """
    >>> op_from_token("LSHIFT")
    <Op.LSHIFT: 'lshift'>
    >>> op_from_token("eql")
    <Op.EQL: 'eql'>
    >>> op_from_token("XOR")
    Traceback (most recent call last):
      ...
    ValueError: Unknown operation 'XOR'.
    """
    try:
        return Op(token.lower())
    except ValueError:
        raise ValueError(f"Unknown operation {token!r}.") from None


def _truncated_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def evaluate(op: Op, a: int, b: int | None = None, bits: int | None = None) -> int:
    """
    Apply op to its operand(s), masking the result to the given bit width.

    DIV truncates toward zero and MOD keeps the dividend's sign.

    >>> evaluate(Op.NOT, 123, bits=16)
    65412
    >>> evaluate(Op.LSHIFT, 123, 2)
    492
    >>> evaluate(Op.DIV, -7, 2), evaluate(Op.MOD, -7, 2)
    (-3, -1)
    >>> evaluate(Op.EQL, 4, 4)
    1
    """
    if op.arity == 2 and b is None:
        raise ValueError(f"{op.name} needs two operands.")

    if op is Op.NOT:
        result = ~a
    elif op is Op.ADD:
        result = a + b
    elif op is Op.MUL:
        result = a * b
    elif op is Op.DIV:
        result = _truncated_div(a, b)
    elif op is Op.MOD:
        result = a - b * _truncated_div(a, b)
    elif op is Op.EQL:
        result = int(a == b)
    elif op is Op.AND:
        result = a & b
    elif op is Op.OR:
        result = a | b
    elif op is Op.LSHIFT:
        result = a << b
    elif op is Op.RSHIFT:
        result = a >> b
    else:
        raise ValueError(f"Unsupported operation {op!r}.")

    if bits is not None:
        result &= (1 << bits) - 1

    return result
