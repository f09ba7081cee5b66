"""
Argosy tokenizers.

The tokenizer is the external grammar engine: it learns the declared switches
and turns argv into a flat mapping from internal keys to raw values. Providers
only rely on the Tokenizer protocol; ArgparseTokenizer adapts the standard
library's argparse to it.

Contract
- register_switch(names, **hints): called once per declared parameter. Hints are
  argparse-style keywords (help, dest, default, action, choices, metavar).
- parse(argv) -> Mapping[str, Any]: keys are the `dest` hints; a switch that was
  not supplied is reported as None.

Failures never exit the process: both a conflicting registration and a rejected
token raise TokenizerError, and -h/--help raises HelpRequest with the help text.
"""
import argparse
from typing import Protocol, runtime_checkable

from .faults import HelpRequest, TokenizerError
from .utils import Unset, coalesce


@runtime_checkable
class Tokenizer(Protocol):
    def register_switch(self, names, /, **hints): ...
    def parse(self, argv, /): ...


class _ArgumentParser(argparse.ArgumentParser):
    """
    argparse parser that reports problems as TokenizerError instead of exiting.
    """

    def error(self, message):
        raise TokenizerError(message, prog=self.prog)


class _HelpAction(argparse.Action):
    """
    -h/--help: raise HelpRequest instead of printing the help and exiting.
    """

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        raise HelpRequest(parser.format_help(), prog=parser.prog)


class ArgparseTokenizer:
    """
    Tokenizer backed by argparse.

    Parameters
    - prog: Unset | str, program name used in usage text.
    - description: Unset | str, text shown by --help.
    - add_help: bool, whether -h/--help is registered (it raises HelpRequest).
    """

    def __init__(self, prog=Unset, description=Unset, *, add_help=True):
        self._parser = _ArgumentParser(
            prog=coalesce(prog),
            description=coalesce(description),
            add_help=False,
            allow_abbrev=False,
        )
        if add_help:
            self._parser.add_argument("-h", "--help", action=_HelpAction, help="show this help message and exit")

    @property
    def prog(self):
        return self._parser.prog

    def register_switch(self, names, /, **hints):
        try:
            self._parser.add_argument(*names, **hints)
        except argparse.ArgumentError as error:
            raise TokenizerError(str(error), prog=self.prog) from None

    def parse(self, argv, /):
        try:
            namespace = self._parser.parse_args(list(argv))
        except argparse.ArgumentError as error:
            self._parser.error(str(error))
        return vars(namespace)

    def format_help(self):
        return self._parser.format_help()


__all__ = (
    "Tokenizer",
    "ArgparseTokenizer",
)
