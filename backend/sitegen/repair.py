"""
Response repair: coerce raw completion text into a JSON object.

The model is asked for strict JSON, but page markup travels as string values
and the usual failure is an unescaped quote or a literal newline inside one of
them. Repair is an ordered list of strategies; each returns a RepairResult and
the first successful one wins.
"""

import json
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from json_repair import repair_json

from sitegen.errors import NoJsonObjectFound, UnparsableResponse
from sitegen.logger import get_logger

logger = get_logger(__name__)

# A backslash followed by a valid JSON escape is kept as a pair, any other backslash is doubled
_BACKSLASH = re.compile(r'\\(["\\/bfnrt]|u[0-9a-fA-F]{4})|\\')
# What may follow a quote that really closes a string
_STRING_TERMINATOR = re.compile(r"\s*(?:[:,}\]]|$)")


@dataclass
class RepairResult:
    """Outcome of a single repair stage"""

    stage: str
    value: Optional[dict] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def _parse_object(text: str, stage: str) -> RepairResult:
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        return RepairResult(stage=stage, error=str(e))
    if not isinstance(value, dict):
        return RepairResult(
            stage=stage, error=f"expected a JSON object, got {type(value).__name__}"
        )
    return RepairResult(stage=stage, value=value)


def extract_json_span(text: str) -> str:
    """Slice text from the first '{' to the last '}'"""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise NoJsonObjectFound("No JSON object found in response", text)
    return text[start : end + 1]


def first_json_object(span: str) -> str:
    """Cut a span down to its first balanced '{...}' object.

    Braces inside string values are ignored. If the braces never balance
    (e.g. a quote left open) the span is returned unchanged.
    """
    depth = 0
    in_string = False
    escape = False
    for i, ch in enumerate(span):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                if "{" in span[i + 1 :]:
                    logger.warning("Response holds more than one JSON object, keeping the first")
                return span[: i + 1]
    return span


# --- textual fixups, applied in order ---


def collapse_line_breaks(text: str) -> str:
    return re.sub(r"[\r\n]+", " ", text)


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text)


def escape_stray_backslashes(text: str) -> str:
    return _BACKSLASH.sub(
        lambda match: match.group(0) if match.group(1) else "\\\\", text
    )


def escape_inner_quotes(text: str) -> str:
    """Escape quotes inside string values that would otherwise end the string.

    A quote only closes a string when the next non-space character is one of
    ':' ',' '}' ']' or the end of the text. Expects backslashes to already be
    valid escape pairs.
    """
    out = []
    in_string = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_string and ch == "\\":
            out.append(text[i : i + 2])
            i += 2
            continue
        if ch == '"':
            if not in_string:
                in_string = True
            elif _STRING_TERMINATOR.match(text, i + 1):
                in_string = False
            else:
                out.append('\\"')
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


TEXT_FIXUPS: List[Callable[[str], str]] = [
    collapse_line_breaks,
    collapse_whitespace,
    escape_stray_backslashes,
    escape_inner_quotes,
]


# --- strategies ---


def parse_strict(text: str) -> RepairResult:
    return _parse_object(text, "strict")


def parse_span(span: str) -> RepairResult:
    return _parse_object(span, "span")


def parse_with_fixups(span: str) -> RepairResult:
    fixed = span
    for fixup in TEXT_FIXUPS:
        fixed = fixup(fixed)
    return _parse_object(fixed, "fixups")


def parse_with_json_repair(span: str) -> RepairResult:
    # Line breaks are collapsed first so repaired strings never carry raw newlines.
    # json-repair keeps the last of several objects, the first one is wanted here
    try:
        repaired = repair_json(first_json_object(collapse_line_breaks(span)))
    except (ValueError, RecursionError) as e:
        return RepairResult(stage="json_repair", error=str(e))
    if not isinstance(repaired, str):
        return RepairResult(stage="json_repair", error="repair produced no text")
    return _parse_object(repaired, "json_repair")


SPAN_STRATEGIES: List[Callable[[str], RepairResult]] = [
    parse_span,
    parse_with_fixups,
    parse_with_json_repair,
]


def repair_response(raw: str) -> dict:
    """Parse raw completion text into a JSON object or raise UnparsableResponse"""
    result = parse_strict(raw)
    if result.ok:
        return result.value
    logger.warning(f"Strict JSON parse failed, attempting repair: {result.error}")

    span = extract_json_span(raw)
    for strategy in SPAN_STRATEGIES:
        result = strategy(span)
        if result.ok:
            logger.info(f"Parsed model response at repair stage '{result.stage}'")
            return result.value
        logger.warning(f"Repair stage '{result.stage}' failed: {result.error}")

    logger.error(f"Raw response (first 500 chars): {raw[:500]}")
    raise UnparsableResponse(
        f"Invalid JSON response from completion API: {result.error}", raw
    )
