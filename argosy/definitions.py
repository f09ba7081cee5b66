r"""
Argosy parameter definitions.

Overview
- Definitions are the immutable, declarative description of one parameter, supplied
  by the tool author and handed to ParameterProvider.define_*_parameter().
  • FlagDefinition: presence-only switch, e.g. --verbose/-v.
  • StringDefinition: a single text value, e.g. --message "hello".
  • StringListDefinition: repeatable text value, e.g. --tag a --tag b.
  • IntegerDefinition: a single integer value, e.g. --max-attempts 5.
  • OptionDefinition: a text value constrained to a closed set, e.g. --level low.

Metadata (sanitized on construction)
- long_name: mandatory, "--name" / "--long-name".
- short_name: Unset | "-x" (a single letter).
- description: Unset | str (help text), non-empty when provided.
- required: bool.
- default: Unset | value matching the kind (bool, str, Iterable[str], int, member of options).
- key: Unset | str, the internal identity correlating the parameter with the tokenizer output.
- options: OptionDefinition only, non-empty and free of duplicates.

Validation highlights
- Wrong Python types raise TypeError; malformed values raise InvalidDefinitionError.
- Long names must match r"--[^\W\d_](-?[^\W_]+)*"; short names r"-[^\W\d_]".
- A default outside the options of an OptionDefinition is rejected.
- required=True with a default is accepted (the provider warns about it when declared).

Quick example:
    >>> verbose = FlagDefinition("--verbose", "-v", "show more output")
    >>> level = OptionDefinition("--level", options=("low", "high"), default="low")
    >>> level.names
    ('--level',)
"""
import re
from collections.abc import Iterable

from .faults import InvalidDefinitionError
from .utils import *


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the metadata shared by every definition.

    - long_name: mandatory string matching the long switch pattern.
    - short_name: optional string matching the short switch pattern.
    - description: optional, non-empty after trimming.
    - key: optional, non-empty after trimming.

    Mutates the provided metadata dict in place.
    """
    if not isinstance(long_name := metadata["long_name"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'long_name' must be a string")
    elif not (long_name := long_name and long_name.strip()):
        raise InvalidDefinitionError(f"{cls.__typename__} must specify a long name")
    elif not re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", long_name):
        raise InvalidDefinitionError(
            f"{cls.__typename__} long name {long_name!r} must look like '--name' or '--long-name'",
            name=long_name
        )
    metadata["long_name"] = long_name

    if not isinstance(short_name := metadata["short_name"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short_name' must be a string")
    elif isinstance(short_name, str) and not re.fullmatch(r"-[^\W\d_]", short_name := short_name.strip()):
        raise InvalidDefinitionError(
            f"{cls.__typename__} short name {short_name!r} must be a dash followed by a single letter",
            name=long_name
        )
    metadata["short_name"] = short_name

    for field in ("description", "key"):
        if not isinstance(value := metadata[field], str | Unset):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise InvalidDefinitionError(f"{cls.__typename__} {field!r} cannot be empty", name=long_name)
        metadata[field] = value

    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")


def _sanitize_default(cls, metadata, /):
    """
    Internal: check that the default value matches the kind of the definition.

    - FlagDefinition: bool.
    - IntegerDefinition: int (bool is rejected).
    - StringListDefinition: an iterable of strings (a bare string is rejected); stored as a tuple.
    - StringDefinition/OptionDefinition: str.
    """
    if (default := metadata["default"]) is Unset:
        return

    if issubclass(cls, FlagDefinition):
        if not isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} 'default' must be a boolean")
    elif issubclass(cls, IntegerDefinition):
        if not isinstance(default, int) or isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} 'default' must be an integer")
    elif issubclass(cls, StringListDefinition):
        if isinstance(default, str) or not isinstance(default, Iterable):
            raise TypeError(f"{cls.__typename__} 'default' must be an iterable of strings")
        default = tuple(default)
        if not all(isinstance(item, str) for item in default):
            raise TypeError(f"{cls.__typename__} 'default' must only contain strings")
        metadata["default"] = default
    elif not isinstance(default, str):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")


def _sanitize_options(cls, metadata, /):
    """
    Internal: validate the closed set of an enumerated option.

    - options: a non-empty iterable of non-empty strings without duplicates (stored as a tuple,
      declaration order preserved).
    - default: when provided, must be one of the options.
    """
    if (options := metadata["options"]) is Unset:
        raise InvalidDefinitionError(
            f"{cls.__typename__} must define its options",
            name=metadata["long_name"]
        )
    if isinstance(options, str) or not isinstance(options, Iterable):
        raise TypeError(f"{cls.__typename__} 'options' must be an iterable of strings")

    sanitized = []
    for option in options:
        if not isinstance(option, str):
            raise TypeError(f"{cls.__typename__} 'options' must only contain strings")
        elif not option.strip():
            raise InvalidDefinitionError(f"{cls.__typename__} 'options' cannot contain empty strings")
        elif option in sanitized:
            raise InvalidDefinitionError(f"{cls.__typename__} 'options' cannot contain duplicates")
        sanitized.append(option)

    if not sanitized:
        raise InvalidDefinitionError(
            f"{cls.__typename__} must define at least one option",
            name=metadata["long_name"]
        )
    metadata["options"] = tuple(sanitized)

    if (default := metadata["default"]) is not Unset and default not in sanitized:
        raise InvalidDefinitionError(
            f"could not find the default value {default!r} in the available options: {", ".join(sanitized)}",
            name=metadata["long_name"]
        )


class Definition(metaclass=IntrospectableType):
    """
    Shared shape of every parameter definition (use one of the concrete kinds).

    Properties
    - The names listed in __introspectable__ are read-only attributes mirroring
      the sanitized metadata; Unset fields read as None.
    """

    __introspectable__ = (
        "long_name",
        "short_name",
        "description",
        "required",
        "default",
        "key",
    )

    def __init__(
            self,
            long_name=Unset,
            short_name=Unset,
            /,
            description=Unset,
            *,
            required=False,
            default=Unset,
            key=Unset
    ):
        if type(self) is Definition:
            raise TypeError("type 'Definition' cannot be instantiated directly")
        metadata = {
            "long_name": long_name,
            "short_name": short_name,
            "description": description,
            "required": required,
            "default": default,
            "key": key,
        }
        self._initialize(metadata)

    def _initialize(self, metadata, /):
        cls = type(self)
        _sanitize_metadata(cls, metadata)
        _sanitize_default(cls, metadata)
        if issubclass(cls, OptionDefinition):
            _sanitize_options(cls, metadata)
        # Backing fields keep Unset; mirror() reads it back as None.
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def has_default(self):
        """
        Whether a default was provided (a falsy default such as False or 0 still counts).
        """
        return self._default is not Unset

    @property
    def names(self):
        """
        Switch spellings in tokenizer order: the short alias (if any), then the long name.
        """
        return tuple(name for name in (self._short_name, self._long_name) if name)


class FlagDefinition(Definition):
    """
    A presence-only switch: its value is True when specified and False otherwise.

    Example: example-tool --debug
    """


class StringDefinition(Definition):
    """
    A switch taking a single text value.

    Example: example-tool --message "Hello, world!"
    """


class StringListDefinition(Definition):
    """
    A switch taking one text value per occurrence, accumulated in order.

    Example: example-tool --add file1.txt --add file2.txt
    """


class IntegerDefinition(Definition):
    """
    A switch taking a single integer value.

    Example: example-tool --max-attempts 5
    """


class OptionDefinition(Definition):
    """
    A switch whose value must be one of a fixed set of strings (similar to an enum).

    Example: example-tool --log-level warn
    """

    __introspectable__ = Definition.__introspectable__ + (
        "options",
    )

    def __init__(
            self,
            long_name=Unset,
            short_name=Unset,
            /,
            description=Unset,
            *,
            options=Unset,
            required=False,
            default=Unset,
            key=Unset
    ):
        metadata = {
            "long_name": long_name,
            "short_name": short_name,
            "description": description,
            "options": options,
            "required": required,
            "default": default,
            "key": key,
        }
        self._initialize(metadata)


__all__ = (
    "Definition",
    "FlagDefinition",
    "StringDefinition",
    "StringListDefinition",
    "IntegerDefinition",
    "OptionDefinition",
)
