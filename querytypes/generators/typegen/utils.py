"""Naming helpers for type generation."""
import re

_UNDERSCORE_WORD = re.compile(r"_+([a-zA-Z0-9])")
_WORD_BOUNDARY = re.compile(r"[^a-zA-Z0-9]+")


def to_camel_case(name: str) -> str:
    """Convert snake_case to camelCase: payload_camel_case -> payloadCamelCase."""
    stripped = name.lstrip("_")
    prefix = name[:len(name) - len(stripped)]
    return prefix + _UNDERSCORE_WORD.sub(lambda m: m.group(1).upper(), stripped)


def to_pascal_case(name: str) -> str:
    """Convert a query name to PascalCase: getNotifications -> GetNotifications."""
    words = [w for w in _WORD_BOUNDARY.split(name) if w]
    return "".join(w[:1].upper() + w[1:] for w in words)


def output_name(file_name: str) -> str:
    """File name without its last extension: queries.sql -> queries."""
    stem, dot, _ = file_name.rpartition(".")
    return stem if dot and stem else file_name
