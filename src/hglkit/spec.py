"""Parses HGL spec sources into rules and test examples."""

import logging
from pathlib import Path

import regex
from pydantic import BaseModel, ValidationError

from . import markup
from .errors import SourceParseError
from .markup import Operator, Pair, Section
from .types import Example, LangInfo, Phase, Rule, Spec, SpecConfig

logger = logging.getLogger(__name__)

_DICT_SECTIONS = frozenset({"lang", "config", "vars", "macros"})
_LIST_SECTIONS = frozenset({Phase.REWRITE.value, Phase.TRANSCRIBE.value, "test"})

# `<name>` refers to a variable; `(?P<name>` and `(?<name>` are regex groups.
_VAR_RE = regex.compile(r"(?<!\(\?P?)<(\w+)>")


def _check_operator(section: Section) -> None:
    expected = Operator.DICT if section.name in _DICT_SECTIONS else Operator.LIST
    for pair in section.pairs:
        if pair.op is not expected:
            msg = f"line {pair.line}: section {section.name!r} expects '{expected.value}' pairs"
            raise SourceParseError(msg)


def _single_value(pair: Pair, section: str) -> str:
    if len(pair.values) != 1:
        msg = f"line {pair.line}: {section} entry {pair.key!r} takes exactly one value, got {len(pair.values)}"
        raise SourceParseError(msg)
    return pair.values[0]


def _build_metadata(section: Section | None, model: type[BaseModel]) -> BaseModel:
    """Build a metadata model from a dict section; list fields keep every value."""
    if section is None:
        return model()
    data: dict[str, object] = {}
    for key, values in section.as_dict().items():
        field = model.model_fields.get(key)
        is_list = field is not None and getattr(field.annotation, "__origin__", None) is list
        data[key] = list(values) if is_list or len(values) > 1 else values[0]
    try:
        return model(**data)
    except ValidationError as e:
        msg = f"invalid {section.name!r} section: {e}"
        raise SourceParseError(msg) from e


def _expand_pattern(source: str, macros: dict[str, str], variables: dict[str, tuple[str, ...]], line: int) -> str:
    """Apply macros, then replace each `<var>` with an alternation of its values."""
    expanded = source
    for name, value in macros.items():
        expanded = expanded.replace(name, value)

    def _substitute(match: regex.Match) -> str:
        name = match.group(1)
        if name not in variables:
            msg = f"line {line}: undefined variable <{name}> in {source!r}"
            raise SourceParseError(msg)
        return "(?:" + "|".join(regex.escape(value) for value in variables[name]) + ")"

    return _VAR_RE.sub(_substitute, expanded)


def _parse_rules(
    section: Section | None,
    phase: Phase,
    macros: dict[str, str],
    variables: dict[str, tuple[str, ...]],
) -> list[Rule]:
    if section is None:
        return []

    rules = []
    for rule_id, pair in enumerate(section.pairs):
        replacement = _single_value(pair, section.name)
        expanded = _expand_pattern(pair.key, macros, variables, pair.line)
        try:
            pattern = regex.compile(expanded)
        except regex.error as e:
            msg = f"line {pair.line}: invalid pattern {pair.key!r}: {e}"
            raise SourceParseError(msg) from e
        try:
            # The empty alternative always matches, so the template is expanded once.
            regex.sub(f"(?:{expanded})|", replacement, "")
        except regex.error as e:
            msg = f"line {pair.line}: invalid replacement {replacement!r} for {pair.key!r}: {e}"
            raise SourceParseError(msg) from e
        rules.append(Rule(phase=phase, id=rule_id, source=pair.key, replacement=replacement, pattern=pattern))
    return rules


def parse_spec(text: str) -> Spec:
    """
    Parse spec source text.

    Rule IDs are assigned per phase in declaration order, starting at 0.

    Args:
        text: The full spec source.

    Returns:
        The parsed Spec.

    Raises:
        SourceParseError: If the markup is malformed or its content is invalid.

    """
    sections = markup.parse(text)

    for name, section in sections.items():
        if name not in _DICT_SECTIONS | _LIST_SECTIONS:
            logger.warning("Ignoring unknown section %r on line %d", name, section.line)
            continue
        _check_operator(section)

    macros_section = sections.get("macros")
    macros = {pair.key: _single_value(pair, "macros") for pair in macros_section.pairs} if macros_section else {}
    vars_section = sections.get("vars")
    variables = vars_section.as_dict() if vars_section else {}

    test_section = sections.get("test")
    tests = [Example(word=pair.key, expected=_single_value(pair, "test")) for pair in test_section.pairs] if test_section else []

    return Spec(
        lang=_build_metadata(sections.get("lang"), LangInfo),
        config=_build_metadata(sections.get("config"), SpecConfig),
        rewrite=_parse_rules(sections.get(Phase.REWRITE.value), Phase.REWRITE, macros, variables),
        transcribe=_parse_rules(sections.get(Phase.TRANSCRIBE.value), Phase.TRANSCRIBE, macros, variables),
        tests=tests,
    )


def load_spec(path: str | Path) -> Spec:
    """
    Load and parse a spec file.

    Args:
        path: Path to the HGL file.

    Returns:
        The parsed Spec.

    Raises:
        SourceOpenError: If the file is missing or unreadable.
        SourceParseError: If the file cannot be parsed.

    """
    text = markup.read_source(path)
    try:
        spec = parse_spec(text)
    except SourceParseError as e:
        msg = f"{path}: {e}"
        raise SourceParseError(msg) from e

    logger.debug(
        "Loaded spec %s: %d rewrite rule(s), %d transcribe rule(s), %d test(s)",
        path,
        len(spec.rewrite),
        len(spec.transcribe),
        len(spec.tests),
    )
    return spec
