"""Runtime switches.

Values are read at call time, so they may be flipped at any point (tests and the command line do).

"""

TRACE_LOGGING = False
"""Emit debug traces from the parser and the matching engine.

Traces are produced per pattern node and per line, so this is very noisy and slow. Only for
debugging.

"""

MAX_GROUP_DEPTH = 100
"""How deep groups may be nested in a pattern.

Parsing and matching recurse once per nesting level, so this keeps both well within the
interpreter's recursion limit. Deeper patterns are rejected with `PatternTooDeepError`.

"""
