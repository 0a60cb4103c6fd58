"""Flag set - binds command-line flags to option fields and tracks which were set."""

import argparse
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("1", "t", "true")
_FALSE_STRINGS = ("0", "f", "false")


class FlagParseError(Exception):
    """Raised when the command line cannot be parsed."""


@runtime_checkable
class FlagValue(Protocol):
    """A custom flag value. ``set`` is called once per occurrence of the flag."""

    def set(self, raw: str) -> None:
        ...

    def __str__(self) -> str:
        ...

    def type(self) -> str:
        ...


@dataclass
class Flag:
    """A registered flag and whether it has been set."""

    name: str
    usage: str
    default: str
    shorthand: Optional[str] = None
    changed: bool = False


def parse_bool(raw: str) -> bool:
    """Parse a boolean flag value (1/0, t/f, true/false)."""
    value = raw.strip().lower()
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    raise ValueError(f"invalid boolean value {raw!r}")


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on bad input."""

    def error(self, message):
        raise FlagParseError(message)


class _BindAction(argparse.Action):
    """Stores a converted value on the bound target and marks the flag changed."""

    def __init__(self, option_strings, dest, flag=None, store=None, **kwargs):
        super().__init__(option_strings, dest, **kwargs)
        self.flag = flag
        self.store = store

    def __call__(self, parser, namespace, values, option_string=None):
        try:
            self.store(values)
        except ValueError as e:
            raise argparse.ArgumentError(
                self, f'invalid argument "{values}" for "--{self.flag.name}" flag: {e}'
            )
        self.flag.changed = True
        setattr(namespace, self.dest, values)


class FlagSet:
    """A named set of flags parsed from one command line.

    Flags write straight into the fields they are bound to, so option objects
    hold their defaults until the user overrides them. Each ``Flag`` records
    whether it was changed, which lets callers tell an explicit value apart
    from a default after parsing.
    """

    def __init__(self, name: str):
        self.name = name
        self.parsed = False
        self._flags: Dict[str, Flag] = {}
        self._parser = _ArgumentParser(
            prog=name,
            argument_default=argparse.SUPPRESS,
            allow_abbrev=False,
        )

    def _add(
        self,
        name: str,
        usage: str,
        default: Any,
        store: Callable[[str], None],
        shorthand: Optional[str] = None,
        metavar: Optional[str] = None,
        nargs: Optional[str] = None,
        const: Optional[str] = None,
    ) -> Flag:
        if name in self._flags:
            raise ValueError(f"flag redefined: {name}")

        flag = Flag(name=name, usage=usage, default=str(default), shorthand=shorthand)
        option_strings = [f"--{name}"]
        if shorthand:
            option_strings.insert(0, f"-{shorthand}")

        help_text = f"{usage} (default {default})" if default not in (None, "") else usage
        kwargs = {"nargs": nargs, "const": const} if nargs else {}
        self._parser.add_argument(
            *option_strings,
            action=_BindAction,
            dest=name,
            flag=flag,
            store=store,
            metavar=metavar,
            help=help_text.replace("%", "%%"),
            **kwargs,
        )
        self._flags[name] = flag
        return flag

    def int_var(self, target: Any, attr: str, name: str, default: int, usage: str,
                shorthand: Optional[str] = None) -> Flag:
        """Bind an integer flag to ``target.attr``."""
        setattr(target, attr, default)
        return self._add(
            name, usage, default,
            store=lambda raw: setattr(target, attr, int(raw)),
            shorthand=shorthand,
            metavar="int",
        )

    def bool_var(self, target: Any, attr: str, name: str, default: bool, usage: str,
                 shorthand: Optional[str] = None) -> Flag:
        """Bind a boolean flag to ``target.attr``. ``--name`` alone means true."""
        setattr(target, attr, default)
        return self._add(
            name, usage, str(default).lower(),
            store=lambda raw: setattr(target, attr, parse_bool(raw)),
            shorthand=shorthand,
            metavar="bool",
            nargs="?",
            const="true",
        )

    def string_var(self, target: Any, attr: str, name: str, default: str, usage: str,
                   shorthand: Optional[str] = None) -> Flag:
        """Bind a string flag to ``target.attr``."""
        setattr(target, attr, default)
        return self._add(
            name, usage, default,
            store=lambda raw: setattr(target, attr, raw),
            shorthand=shorthand,
            metavar="string",
        )

    def var(self, value: FlagValue, name: str, usage: str,
            shorthand: Optional[str] = None) -> Flag:
        """Bind a custom value. Every occurrence of the flag calls ``value.set``."""
        if not isinstance(value, FlagValue):
            raise TypeError(f"flag {name!r} value must implement set/__str__/type")
        return self._add(
            name, usage, str(value),
            store=value.set,
            shorthand=shorthand,
            metavar=value.type(),
        )

    def lookup(self, name: str) -> Optional[Flag]:
        """Return the flag registered under ``name``, or None."""
        return self._flags.get(name)

    def changed(self, name: str) -> bool:
        """Check if a flag was set on the command line (or marked changed)."""
        flag = self._flags.get(name)
        return flag is not None and flag.changed

    def parse(self, args: Sequence[str]) -> None:
        """Parse ``args`` (without the program name) into the bound fields."""
        self._parser.parse_args(list(args))
        self.parsed = True
        logger.debug(f"Parsed flag set {self.name}: changed={self.changed_names()}")

    def changed_names(self) -> List[str]:
        """Names of all flags marked changed, in registration order."""
        return [f.name for f in self._flags.values() if f.changed]

    def format_help(self) -> str:
        return self._parser.format_help()

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags.values())

    def __contains__(self, name: str) -> bool:
        return name in self._flags
