from __future__ import annotations

import time
from random import Random

from gapgrep.matcher import from_pattern

rnd = Random(42)

LINE_LENGTH = 200
N = 1000

lines = ["".join(rnd.choice("abcd xyz") for _ in range(LINE_LENGTH)) for _ in range(N)]

patterns = [
    "abc",
    "a(bc)*d",
    "^[abcd ]*$",
    "(a|b)+c?d",
    "x.*y.*z",
]

for pattern in patterns:
    st = time.monotonic()
    matcher = from_pattern(pattern)
    build_time = time.monotonic() - st

    st = time.monotonic()
    matched = sum(1 for _ in matcher.filter(lines))
    match_time = time.monotonic() - st

    print(
        f"{pattern!r}: built in {build_time:.6f}s, matched {matched}/{N} lines"
        f" of {LINE_LENGTH} chars in {match_time:.3f}s"
    )
