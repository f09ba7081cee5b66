"""
Argosy parameter handles.

A handle is created by ParameterProvider for every declared definition. It is
wired to the internal key the tokenizer reports the raw value under, and to an
optional converter. Its value stays unassigned until the provider resolves it,
then it is written exactly once: from the raw tokenizer output, or from the
definition's default when nothing was supplied.

Kinds and resolved values
- FlagParameter: bool (False while unassigned).
- StringParameter: str | None.
- StringListParameter: tuple[str, ...] (empty while unassigned, occurrence order kept).
- IntegerParameter: int | None (converted with int()).
- OptionParameter: str | None, always one of `options`.
"""
from enum import StrEnum

from .definitions import *
from .faults import ConversionError, ReuseError
from .utils import *


class ParameterKind(StrEnum):
    FLAG = "flag"
    STRING = "string"
    STRING_LIST = "string-list"
    INTEGER = "integer"
    OPTION = "option"


class Parameter[_T](metaclass=IntrospectableType):
    """
    Common base of the typed handles (use one of the concrete kinds).

    Every kind shares the same capability used by the resolution passes: a key,
    an optional value (see `assigned`), an optional default and a required flag.
    """

    kind = Unset
    __definition__ = Definition
    __introspectable__ = (
        "key",
        "definition",
        "converter",
    )
    __displayable__ = (
        "kind",
        "key",
        "long_name",
        "value",
    )

    def __init__(self, definition, key, /, converter=Unset):
        cls = type(self)
        if cls.kind is Unset:
            raise TypeError(f"type {cls.__name__!r} cannot be instantiated directly")
        if not isinstance(definition, cls.__definition__):
            raise TypeError(f"{cls.__typename__} requires a {cls.__definition__.__typename__}")
        if not isinstance(key, str):
            raise TypeError(f"{cls.__typename__} 'key' must be a string")
        if converter is not Unset and not callable(converter):
            raise TypeError(f"{cls.__typename__} 'converter' must be callable")
        self._definition = definition
        self._key = key
        self._converter = converter
        self._value = Unset

    @property
    def long_name(self):
        return self._definition.long_name

    @property
    def short_name(self):
        return self._definition.short_name

    @property
    def description(self):
        return self._definition.description

    @property
    def required(self):
        return self._definition.required

    @property
    def default(self):
        return self._definition.default

    @property
    def assigned(self):
        """
        Whether the value was written (from raw input or from the default).
        """
        return self._value is not Unset

    @property
    def value(self):
        return coalesce(self._value)

    def _convert(self, raw, /):
        if self._converter is Unset:
            return raw
        try:
            return self._converter(raw)
        except (TypeError, ValueError):
            raise ConversionError(name=self.long_name, value=raw) from None

    def _assign(self, value, /):
        """
        Store an already converted value. A handle is written once.
        """
        if self._value is not Unset:
            raise ReuseError(f"the parameter {self.long_name!r} already has a value", name=self.long_name)
        self._value = value

    def _set_value(self, raw, /):
        """
        Store a raw tokenizer value through the converter.
        """
        self._assign(self._convert(raw))

    def _fill_default(self, default, /):
        """
        Store the default as declared; a no-op once a value exists or when there
        is no default (Unset). Sanitized defaults already have the kind's type, so
        the converter is not applied to them.
        """
        if self._value is Unset and default is not Unset:
            self._assign(default)


class FlagParameter(Parameter[bool]):
    kind = ParameterKind.FLAG
    __definition__ = FlagDefinition

    @property
    def value(self):
        return bool(coalesce(self._value, False))


class StringParameter(Parameter[str]):
    kind = ParameterKind.STRING
    __definition__ = StringDefinition


class StringListParameter(Parameter[tuple[str, ...]]):
    kind = ParameterKind.STRING_LIST
    __definition__ = StringListDefinition

    @property
    def value(self):
        return tuple(coalesce(self._value, ()))

    def _convert(self, raw, /):
        if isinstance(raw, str):
            raw = (raw,)
        return tuple(super(StringListParameter, self)._convert(item) for item in raw)


class IntegerParameter(Parameter[int]):
    kind = ParameterKind.INTEGER
    __definition__ = IntegerDefinition

    def __init__(self, definition, key, /, converter=Unset):
        super().__init__(definition, key, coalesce(converter, int))


class OptionParameter(Parameter[str]):
    kind = ParameterKind.OPTION
    __definition__ = OptionDefinition

    @property
    def options(self):
        return self._definition.options

    def _convert(self, raw, /):
        if (value := super()._convert(raw)) not in self.options:
            raise ConversionError(
                f"invalid choice {raw!r} for the parameter {self.long_name!r} "
                f"(choose from {", ".join(self.options)})",
                name=self.long_name,
                value=raw
            )
        return value


__all__ = (
    "ParameterKind",
    "Parameter",
    "FlagParameter",
    "StringParameter",
    "StringListParameter",
    "IntegerParameter",
    "OptionParameter",
)
