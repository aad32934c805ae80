"""
Arithmetic trap questions. Every template has two readings: the troll answer
evaluates strictly left to right, the correct answer respects operator
precedence. The game pays out on the troll answer.
"""
from .entities import Question


def _mul_operands(rng, level):
    b = int(rng.integers(1, 6 + level))
    c = int(rng.integers(2, 4 + level // 2))
    return b, c


def _div_operands(rng, level):
    # a and b are multiples of c so both readings divide exactly.
    c = int(rng.integers(2, 4 + level // 2))
    k = int(rng.integers(1, 4 + level))
    m = k + int(rng.integers(1, 4 + level))
    return c * m, c * k, c


def _add_mul(rng, level):
    a = int(rng.integers(1, 6 + level))
    b, c = _mul_operands(rng, level)
    return f"{a} + {b} × {c}", (a + b) * c, a + b * c


def _sub_mul(rng, level):
    b, c = _mul_operands(rng, level)
    a = b + int(rng.integers(1, 6 + level))
    return f"{a} - {b} × {c}", (a - b) * c, a - b * c


def _add_div(rng, level):
    a, b, c = _div_operands(rng, level)
    return f"{a} + {b} ÷ {c}", (a + b) // c, a + b // c


def _sub_div(rng, level):
    a, b, c = _div_operands(rng, level)
    return f"{a} - {b} ÷ {c}", (a - b) // c, a - b // c


# Unlocked one per level, like the original add/subtract/multiply/divide ladder.
TEMPLATES = (_add_mul, _sub_mul, _add_div, _sub_div)


def _distractor(rng, troll, correct):
    anchors = (troll, correct)
    while True:
        base = anchors[int(rng.integers(2))]
        offset = int(rng.integers(1, 6))
        if rng.random() < 0.5:
            offset = -offset
        wrong = base + offset
        if wrong not in anchors:
            return wrong


def generate_question(level, rng):
    available = TEMPLATES[:max(1, min(level, len(TEMPLATES)))]
    template = available[int(rng.integers(len(available)))]
    expression, troll, correct = template(rng, level)
    return Question(
        display_text=f"{expression} = ?",
        troll_answer=troll,
        correct_math_answer=correct,
        wrong_answer=_distractor(rng, troll, correct),
    )
