"""Loading symbolic constants from a YAML or JSON file.

Two layouts are accepted.  The explicit one separates the kinds::

    integers:
      MAX_QTY: 500
      MIN_AGE: 18
    strings:
      COUNTRY: 'NL'

A flat mapping is also accepted, each value classified by its type::

    MAX_QTY: 500
    COUNTRY: NL

JSON files use the same shapes.  ``.json`` files are read with the
``json`` module; everything else is parsed with ``yaml.safe_load``
(YAML is a superset of JSON).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ruletag.errors import ConfigurationError
from ruletag.grammar.tokens import UINT64_MASK

if TYPE_CHECKING:
    from ruletag.engine import ValidatorEngine

logger = logging.getLogger(__name__)

_SECTIONS = ("integers", "strings")


def read_constants(path: str | Path) -> tuple[dict[str, int], dict[str, str]]:
    """Read a constants file and return ``(integers, strings)``.

    Raises
    ------
    ConfigurationError
        If the file cannot be read or parsed, or has an invalid shape.
    """
    file = Path(path)
    try:
        text = file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read constants file {file}: {exc}") from exc
    try:
        data = json.loads(text) if file.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot parse constants file {file}: {exc}") from exc
    return split_constants(data or {}, source=str(file))


def split_constants(data: Any, source: str = "<mapping>") -> tuple[dict[str, int], dict[str, str]]:
    """Classify a mapping of constants into integer and string tables."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: constants must be a mapping, got {type(data).__name__}")

    integers: dict[str, int] = {}
    strings: dict[str, str] = {}
    if set(data) and set(data) <= set(_SECTIONS):
        for section in _SECTIONS:
            values = data.get(section) or {}
            if not isinstance(values, dict):
                raise ConfigurationError(f"{source}: {section!r} must be a mapping")
            for name, value in values.items():
                _classify(source, str(name), value, integers, strings, expected=section)
    else:
        for name, value in data.items():
            _classify(source, str(name), value, integers, strings)
    return integers, strings


def _classify(
    source: str,
    name: str,
    value: Any,
    integers: dict[str, int],
    strings: dict[str, str],
    expected: str | None = None,
) -> None:
    is_int = isinstance(value, int) and not isinstance(value, bool)
    if is_int and expected in (None, "integers"):
        if not 0 <= value <= UINT64_MASK:
            raise ConfigurationError(
                f"{source}: integer constant {name!r}={value} is outside the unsigned 64-bit range"
            )
        integers[name] = value
    elif isinstance(value, str) and expected in (None, "strings"):
        strings[name] = value
    else:
        raise ConfigurationError(
            f"{source}: constant {name!r} has unsupported value {value!r}"
        )


def load_constants(path: str | Path, engine: ValidatorEngine | None = None) -> int:
    """Register every constant in ``path`` on ``engine``.

    Parameters
    ----------
    path:
        A YAML or JSON constants file.
    engine:
        Target engine; the default engine when ``None``.

    Returns
    -------
    int
        Number of constants registered.

    Raises
    ------
    ConfigurationError
        If the file is unusable, or a name fails the identifier rule
        (``InvalidNameError``).
    """
    if engine is None:
        from ruletag.engine import default_engine

        engine = default_engine()

    integers, strings = read_constants(path)
    for name, value in integers.items():
        engine.register_constant_int(name, value)
    for name, value in strings.items():
        engine.register_constant_str(name, value)
    logger.debug(
        "Loaded %d integer and %d string constant(s) from %s",
        len(integers),
        len(strings),
        path,
    )
    return len(integers) + len(strings)
