"""Rewrites user-facing keyword forms into the parser's native operator tokens."""

import re

# Quoted literals are captured so they pass through untouched.
_QUOTED_SEGMENT = re.compile(r"""('(?:\\.|[^'\\])*'?|"(?:\\.|[^"\\])*"?)""")

_AND_KEYWORD = re.compile(r"\bAND\b")
_OR_KEYWORD = re.compile(r"\bOR\b")
_LONE_EQUALS = re.compile(r"(?<![=!<>])=(?!=)")


def _normalize_segment(segment: str) -> str:
    segment = _AND_KEYWORD.sub("&&", segment)
    segment = _OR_KEYWORD.sub("||", segment)
    return _LONE_EQUALS.sub("==", segment)


def normalize_rule(rule_string: str) -> str:
    """Normalize a raw rule string.

    ``AND`` becomes ``&&``, ``OR`` becomes ``||`` and a lone ``=`` becomes
    ``==``. Text inside quoted string literals is left alone.

    Args:
        rule_string: Rule as typed by the user.

    Returns:
        The rule using only native operator tokens.

    Examples:
        >>> normalize_rule("age > 30 AND department = 'Sales'")
        "age > 30 && department == 'Sales'"
    """
    parts = _QUOTED_SEGMENT.split(rule_string)
    # re.split with one capturing group alternates unquoted/quoted segments.
    return "".join(
        part if index % 2 else _normalize_segment(part)
        for index, part in enumerate(parts)
    )
