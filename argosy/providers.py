"""
Argosy parameter providers: declare, then resolve.

What this module provides
- ParameterProvider: the base class a CLI tool extends to declare its parameters.
  • on_declare_parameters(): the hook where define_*_parameter() calls happen.
  • define_flag_parameter / define_string_parameter / define_string_list_parameter /
    define_integer_parameter / define_option_parameter: validate a definition, claim
    its key, register the switch with the tokenizer and return a typed handle.
  • process_parsed_data(data): fill every handle from the tokenizer output, then
    fill defaults.
  • validate_parameters(): fail with one MissingRequiredParametersError listing every
    required parameter that is still unassigned.
  • parse(argv): all of the above in one call.
- invoke(provider, prompt): CLI boundary runner that renders faults in shell mode.

Lifecycle
    PENDING → DECLARING → REGISTERED → FILLED → VALIDATED
Every step runs once. Running a finished step again raises ReuseError; running a
step before its predecessor raises LifecycleError.

Quick start
    from argosy import ParameterProvider, invoke

    class Greeter(ParameterProvider):
        def on_declare_parameters(self):
            self.verbose = self.define_flag_parameter("--verbose", "-v", "chatty output")
            self.name = self.define_string_parameter("--name", description="who to greet", required=True)

    greeter = Greeter().parse(["--name", "Alice"])
    greeter.name.value     # "Alice"
    greeter.verbose.value  # False
"""
import shlex
import sys
from abc import ABC, abstractmethod
from collections import namedtuple
from collections.abc import Iterable, Mapping
from enum import IntEnum
from types import MappingProxyType

from .definitions import *
from .faults import *
from .keys import KeyRegistry
from .parameters import *
from .tokenizers import ArgparseTokenizer, Tokenizer
from .utils import *


class ProviderState(IntEnum):
    PENDING = 0
    DECLARING = 1
    REGISTERED = 2
    FILLED = 3
    VALIDATED = 4


_ParameterMetadata = namedtuple("ParameterMetadata", (
    "parameter",
    "required",
    "default",
))


def _definition(cls, args, kwargs, /):
    """
    Internal: accept either a ready definition of the expected kind or the arguments to build one.
    """
    if len(args) == 1 and not kwargs and isinstance(args[0], Definition):
        if not isinstance(definition := args[0], cls):
            raise TypeError(f"expected a {cls.__typename__}, got a {type(definition).__typename__}")
        return definition
    return cls(*args, **kwargs)


def _tokens(prompt, /):
    """
    Internal: normalize a prompt into a list of tokens.

    - Unset: read sys.argv[1:].
    - str: shell-like string split with shlex.split.
    - Iterable[str]: pre-tokenized sequence (items are kept verbatim).
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class ParameterProvider(ABC):
    """
    Base class for anything that declares command-line parameters.

    Parameters
    - tokenizer: Unset | Tokenizer
      The grammar engine switches are registered with. Defaults to an ArgparseTokenizer
      built from prog/description.
    - prog: Unset | str, program label (usage text, fault headers).
    - description: Unset | str, help text of the default tokenizer.
    - shell: bool, render faults on stderr and exit instead of raising (see __invoke__).
    - fancy: bool, render faults inside a panel.
    - colorful: bool, colorize rendered faults.
    """

    def __init__(
            self,
            tokenizer=Unset,
            *,
            prog=Unset,
            description=Unset,
            shell=False,
            fancy=False,
            colorful=False
    ):
        if not isinstance(prog, str | Unset):
            raise TypeError(f"{type(self).__name__}() 'prog' must be a string")
        if not isinstance(description, str | Unset):
            raise TypeError(f"{type(self).__name__}() 'description' must be a string")
        if tokenizer is Unset:
            tokenizer = ArgparseTokenizer(prog, description)
        elif not isinstance(tokenizer, Tokenizer):
            raise TypeError(f"{type(self).__name__}() 'tokenizer' must implement register_switch() and parse()")

        self._tokenizer = tokenizer
        self._keys = KeyRegistry()
        self._parameters = []
        self._metadata = {}
        self._state = ProviderState.PENDING
        self._prog = coalesce(prog, getattr(tokenizer, "prog", None))
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

    @abstractmethod
    def on_declare_parameters(self):
        """
        Declare the parameters of the tool, e.g. by calling define_flag_parameter().

        Invoked exactly once, by declare_parameters().
        """

    @property
    def state(self):
        return self._state

    @property
    def tokenizer(self):
        return self._tokenizer

    @property
    def keys(self):
        return self._keys

    @property
    def parameters(self):
        """
        Declared handles by long name, in declaration order (read-only).
        """
        return MappingProxyType({name: metadata.parameter for name, metadata in self._metadata.items()})

    def get_parameter(self, long_name, /):
        try:
            return self._metadata[long_name].parameter
        except KeyError:
            raise KeyError(f"undefined parameter {long_name!r}") from None

    def _guard(self, expected, target, operation, /):
        """
        Fail unless the state machine may move from `expected` to `target`.
        """
        if self._state is expected:
            return
        if self._state >= target:
            raise ReuseError(f"{operation} already ran on this provider")
        raise LifecycleError(f"{operation} cannot run while the provider is {self._state.name.lower()}")

    def _advance(self, expected, target, operation, /):
        """
        Move the state machine from `expected` to `target`, or fail.
        """
        self._guard(expected, target, operation)
        self._state = target

    def declare_parameters(self):
        """
        Run on_declare_parameters() once and seal the declarations.
        """
        self._advance(ProviderState.PENDING, ProviderState.DECLARING, "declare_parameters()")
        self.on_declare_parameters()
        self._state = ProviderState.REGISTERED

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this provider's presentation options merged in.
        """
        trigger(
            fault,
            **{
                "prog": self._prog,
                "shell": self.shell,
                "fancy": self.fancy,
                "colorful": self.colorful,
            } | options
        )

    def _define(self, cls, definition, converter, /, **hints):
        """
        Internal: declare one parameter; nothing is recorded unless every step succeeds.
        """
        if self._state is not ProviderState.DECLARING:
            raise LifecycleError(
                "parameters can only be defined from on_declare_parameters()",
                name=definition.long_name
            )
        if definition.long_name in self._metadata:
            raise DuplicateNameError(name=definition.long_name)

        key = Unset if definition.key is None else definition.key
        with self._keys.claim(definition.long_name, key) as key:
            parameter = cls(definition, key, converter)
            self._tokenizer.register_switch(
                definition.names,
                help=definition.description,
                dest=key,
                default=None,
                **hints
            )

        self._parameters.append(parameter)
        self._metadata[definition.long_name] = _ParameterMetadata(
            parameter,
            definition.required,
            definition.default if definition.has_default else Unset,
        )

        if definition.required and definition.has_default:
            self.trigger(RedundantRequirementWarning(name=definition.long_name), stacklevel=6)

        return parameter

    def define_flag_parameter(self, *args, **kwargs):
        """
        Define a switch whose value is True when it is provided, and False otherwise.

        Accepts a FlagDefinition or the arguments of one.
        Example: example-tool --debug
        """
        definition = _definition(FlagDefinition, args, kwargs)
        return self._define(FlagParameter, definition, Unset, action="store_true")

    def define_string_parameter(self, *args, converter=Unset, **kwargs):
        """
        Define a parameter whose value is a single text string.

        Example: example-tool --message "Hello, world!"
        """
        definition = _definition(StringDefinition, args, kwargs)
        return self._define(StringParameter, definition, converter, metavar="STRING")

    def define_string_list_parameter(self, *args, converter=Unset, **kwargs):
        """
        Define a parameter whose value is one or more text strings (one per occurrence).

        Example: example-tool --add file1.txt --add file2.txt --add file3.txt
        """
        definition = _definition(StringListDefinition, args, kwargs)
        return self._define(StringListParameter, definition, converter, action="append", metavar="STRING")

    def define_integer_parameter(self, *args, converter=Unset, **kwargs):
        """
        Define a parameter whose value is an integer.

        Example: example-tool --max-attempts 5
        """
        definition = _definition(IntegerDefinition, args, kwargs)
        return self._define(IntegerParameter, definition, converter, metavar="INTEGER")

    def define_option_parameter(self, *args, converter=Unset, **kwargs):
        """
        Define a parameter whose value must be one of a fixed set of strings (similar to an enum).

        Example: example-tool --log-level warn
        """
        definition = _definition(OptionDefinition, args, kwargs)
        return self._define(OptionParameter, definition, converter, choices=definition.options)

    def process_parsed_data(self, data, /):
        """
        Fill every handle from the tokenizer output, then apply defaults.

        - data: Mapping from internal keys to raw values; None or a missing key means
          the parameter was not supplied.
        - declarations run first if they have not run yet.

        Every raw value is converted before any handle is written: when a conversion
        fails, no handle changes and the provider stays registered.
        """
        if not isinstance(data, Mapping):
            raise TypeError("process_parsed_data() argument must be a mapping")
        if self._state is ProviderState.PENDING:
            self.declare_parameters()
        self._guard(ProviderState.REGISTERED, ProviderState.FILLED, "process_parsed_data()")

        converted = [
            (parameter, parameter._convert(raw)) for parameter in self._parameters
            if (raw := data.get(parameter.key)) is not None
        ]
        for parameter, value in converted:
            parameter._assign(value)
        for metadata in self._metadata.values():
            metadata.parameter._fill_default(metadata.default)

        self._state = ProviderState.FILLED

    def validate_parameters(self):
        """
        Fail when any required parameter is still unassigned after the fills.

        Raises
        - MissingRequiredParametersError: listing every missing long name, in declaration order.
        """
        self._advance(ProviderState.FILLED, ProviderState.VALIDATED, "validate_parameters()")

        missing = [
            name for name, metadata in self._metadata.items()
            if metadata.required and not metadata.parameter.assigned
        ]
        if missing:
            raise MissingRequiredParametersError(names=missing)

    def values(self):
        """
        Resolved values by long name (read-only); available once the values were filled.
        """
        if self._state < ProviderState.FILLED:
            raise LifecycleError("values() requires the parsed data to be processed first")
        return MappingProxyType({name: metadata.parameter.value for name, metadata in self._metadata.items()})

    def parse(self, argv=Unset, /):
        """
        Declare (if needed), tokenize argv, fill and validate; returns the provider.

        - argv: Unset (sys.argv[1:]), a shell-like string, or an iterable of tokens.
        """
        tokens = _tokens(argv)
        if self._state is ProviderState.PENDING:
            self.declare_parameters()
        self._guard(ProviderState.REGISTERED, ProviderState.FILLED, "parse()")
        self.process_parsed_data(self._tokenizer.parse(tokens))
        self.validate_parameters()
        return self

    def __invoke__(self, prompt=Unset, /):
        """
        CLI boundary: parse the prompt and, in shell mode, render any fault and exit.

        Outside shell mode faults propagate unchanged.
        """
        try:
            return self.parse(prompt)
        except ParameterException as fault:
            if not self.shell:
                raise
            self.trigger(fault)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for providers.

    Parameters
    - object: a ParameterProvider instance, or a subclass (instantiated with defaults).
    - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of tokens.

    Returns
    - the resolved provider.
    """
    if isinstance(object, type) and issubclass(object, ParameterProvider):
        object = object()
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)
    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "ProviderState",
    "ParameterProvider",
    "invoke",
)
