"""
Argosy faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the package
  reports. Codes are grouped by domain to keep logs/searches predictable.
- ParameterException / ParameterWarning: base types that carry a message plus
  structured fields (the offending names, keys, values) and know how to render
  themselves with rich.
- trigger(): central entry point to surface a fault at the CLI boundary
  (respecting shell/fancy/colorful).

Data vs. presentation
- Faults are raised as plain structured values: `fault.names`, `fault.key`, ...
  are always available and the message never contains terminal styling.
- Color and panels are applied only by __rich__, i.e. when a CLI boundary prints
  the fault (see trigger() and ParameterProvider.trigger()).
- Faults go to `console` (stderr); HelpRequest text goes to `output` (stdout).

Host hooks (read from __main__ when rendering)
- __styles__: mapping of style names to rich styles, merged over the defaults.
- __codes__: mapping of FaultCode to friendlier labels.
- __prog__: program label shown in headers.
"""
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce, rename

console = Console(stderr=True)
output = Console(highlight=False)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - definitions (211xx)
      • INVALID_DEFINITION, DUPLICATE_NAME
    - keys (212xx)
      • DUPLICATE_KEY
    - resolution (213xx)
      • MISSING_REQUIRED, CONVERSION_FAILED
    - lifecycle (214xx)
      • OUT_OF_ORDER, REUSED_PROVIDER
    - tokenizer (215xx)
      • TOKENIZER_REJECTED, HELP_REQUESTED
    - warnings (22xxx)
      • REDUNDANT_REQUIREMENT
    """
    # --- definition errors (211xx) ---
    INVALID_DEFINITION          = 21101
    DUPLICATE_NAME              = 21102

    # --- key errors (212xx) ---
    DUPLICATE_KEY               = 21201

    # --- resolution errors (213xx) ---
    MISSING_REQUIRED            = 21301
    CONVERSION_FAILED           = 21302

    # --- lifecycle errors (214xx) ---
    OUT_OF_ORDER                = 21401
    REUSED_PROVIDER             = 21402

    # --- tokenizer errors (215xx) ---
    TOKENIZER_REJECTED          = 21501
    HELP_REQUESTED              = 21502

    # --- warnings (22xxx) ---
    REDUNDANT_REQUIREMENT       = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_PALETTES = {
    "error": {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "error-title": "bold #FF4DA6",  # friendly pinky title

        # body
        "error-message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    },
    "warning": {
        # header parts
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",  # amber fault code for warnings
        "warning-title": "bold #FFC2E0",

        # body
        "warning-message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    },
}


def _render(fault, kind, /):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the message, then " → hint" when a hint is available.
    - fancy: header becomes the title of a panel wrapping the body.
    """
    main = __import__("__main__")
    styles = defaultdict(str, _PALETTES[kind] | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", fault.options.get("prog") or "argosy"), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.code.normalize(), styler("code")),
        " | ",
        text(fault.title.title(), styler(kind + "-title")),
        " ]"
    )
    body = [text(fault.message, styler(kind + "-message"))]
    if hint := fault.options.get("hint", type(fault).hint):
        body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fault.options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


def view(name, /):
    """
    expose a structured fault field (stored in fault.options) as a read-only property.
    """

    @rename(name)
    def getter(self):
        return self.options.get(name)

    return property(getter)


class ParameterException(Exception):
    """
    base class of every error raised by argosy.

    construction
    - message: str, positional-only. subclasses derive a default from their fields.
    - **options: structured fields (e.g. names=..., key=...) and presentation
      options (prog, shell, fancy, colorful, hint). stored read-only in `options`.
    """
    code = FaultCode.INVALID_DEFINITION
    title = "parameter error"
    hint = None

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, self.title)
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    def __rich__(self):
        return _render(self, "error")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidDefinitionError(ParameterException, ValueError):
    """
    a parameter definition is malformed (bad names, empty options, default outside the options, ...).
    """
    code = FaultCode.INVALID_DEFINITION
    title = "invalid definition"
    name = view("name")


class DuplicateNameError(InvalidDefinitionError):
    """
    a long name was declared twice on the same provider.
    """
    code = FaultCode.DUPLICATE_NAME
    title = "duplicate name"
    hint = "every parameter of a tool needs its own long name"

    def __init__(self, message=Unset, /, **options):
        if message is Unset:
            message = f"the parameter {options["name"]!r} is already defined"
        super().__init__(message, **options)


class DuplicateKeyError(ParameterException):
    """
    two parameters tried to share the same internal key.

    fields
    - key: the contested key.
    - name: long name of the parameter requesting the key.
    - owner: long name of the parameter that already holds it.
    """
    code = FaultCode.DUPLICATE_KEY
    title = "duplicate key"
    hint = "ensure that the key values are unique"
    key = view("key")
    name = view("name")
    owner = view("owner")

    def __init__(self, message=Unset, /, **options):
        if message is Unset:
            message = (
                f"the parameter {options["name"]!r} tried to define the key {options["key"]!r}, "
                f"which is already defined by the {options["owner"]!r} parameter"
            )
        super().__init__(message, **options)


class MissingRequiredParametersError(ParameterException):
    """
    one or more required parameters have no value after resolution.

    fields
    - names: every missing long name, in declaration order.
    """
    code = FaultCode.MISSING_REQUIRED
    title = "missing required parameters"
    hint = "specify every required parameter"

    def __init__(self, message=Unset, /, **options):
        options["names"] = names = tuple(options.get("names", ()))
        if message is Unset:
            message = "missing required parameters: " + ", ".join(names)
        super().__init__(message, **options)

    @property
    def names(self):
        return self.options["names"]


class ConversionError(ParameterException, ValueError):
    """
    a raw value (or default) could not be converted for its parameter.

    fields
    - name: long name of the parameter.
    - value: the raw value that was rejected.
    """
    code = FaultCode.CONVERSION_FAILED
    title = "invalid value"
    name = view("name")
    value = view("value")

    def __init__(self, message=Unset, /, **options):
        if message is Unset:
            message = f"invalid value {options["value"]!r} for the parameter {options["name"]!r}"
        super().__init__(message, **options)


class LifecycleError(ParameterException, RuntimeError):
    """
    a provider operation was called out of order (e.g. defining after parsing).
    """
    code = FaultCode.OUT_OF_ORDER
    title = "out of order"


class ReuseError(LifecycleError):
    """
    a one-shot provider step (declaration, value fill, validation) was run twice.
    """
    code = FaultCode.REUSED_PROVIDER
    title = "provider reused"
    hint = "create a new provider for every invocation"


class TokenizerError(ParameterException):
    """
    the tokenizer rejected the declared switches or the user's tokens.
    """
    code = FaultCode.TOKENIZER_REJECTED
    title = "rejected input"


class HelpRequest(ParameterException):
    """
    the user asked for help; the message is the tokenizer's help text.

    in shell mode the text is printed on stdout and the process exits with status 0.
    """
    code = FaultCode.HELP_REQUESTED
    title = "help requested"

    def __rich__(self):
        return Text(self.message)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        output.out(self.message, end="")
        sys.exit(0)


class ParameterWarning(Warning):
    """
    base class of every warning emitted by argosy.
    """
    code = FaultCode.REDUNDANT_REQUIREMENT
    title = "parameter warning"
    hint = None

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, self.title)
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    def __rich__(self):
        return _render(self, "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RedundantRequirementWarning(ParameterWarning):
    """
    a required parameter also carries a default, so it can never be missing.
    """
    code = FaultCode.REDUNDANT_REQUIREMENT
    title = "redundant requirement"
    hint = "drop either 'required' or the default"
    name = view("name")

    def __init__(self, message=Unset, /, **options):
        if message is Unset:
            message = f"the parameter {options["name"]!r} is required but also has a default"
        super().__init__(message, **options)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - outside shell mode exceptions are raised and warnings emitted with warnings.warn;
      in shell mode both are printed on stderr (exceptions then exit with status 1).

    typical options
    - prog, shell, fancy, colorful, hint, stacklevel.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ParameterException",
    "InvalidDefinitionError",
    "DuplicateNameError",
    "DuplicateKeyError",
    "MissingRequiredParametersError",
    "ConversionError",
    "LifecycleError",
    "ReuseError",
    "TokenizerError",
    "HelpRequest",
    "ParameterWarning",
    "RedundantRequirementWarning",
    "trigger",
)
