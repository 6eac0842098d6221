# region License
# -----------------------------------------------------------------------------
# Derived from cluegen.py
#
# Classes generated from type clues.
#
#     https://github.com/dabeaz/cluegen
#
# Author: David Beazley (@dabeaz).
#         http://www.dabeaz.com
#
# Copyright (C) 2018-2021.
#
# Permission is granted to use, copy, and modify this code in any
# manner as long as this copyright message and disclaimer remain in
# the source code.  There is no warranty.  Try to use the code for the
# greater good.
# -----------------------------------------------------------------------------
# endregion
"""Data classes generated from type clues, in the manner of cluegen.

Annotated class attributes become the positional parameters of a generated ``__init__``; ``__repr__`` and
``__eq__`` are generated the same way. Generation is lazy and happens separately for every concrete class, so a
subclass that adds clues gets methods that know about them.
"""

import copy
import sys
from collections.abc import Callable
from functools import reduce
from types import MemberDescriptorType
from typing import Any, ClassVar, Final, final, get_origin

from ._typing_compat import override

__all__ = ("NOTHING", "Datum", "all_clues", "all_defaults", "generated")


_MUTABLE_DEFAULT_TYPES = (list, dict, set, bytearray)
_GENERATED_NAMES = ("__init__", "__repr__", "__eq__")


@final
class _Nothing:
    __slots__ = ()

    @override
    def __repr__(self) -> str:
        return "NOTHING"


NOTHING: Final[Any] = _Nothing()
"""Placeholder for a mutable default value in a generated signature."""


class generated:  # noqa: N801
    """Descriptor that executes the source returned by ``build(owner)`` the first time the method is needed.

    The resulting function replaces the descriptor on the owner, and remembers the descriptor so classes created
    later can still find it.
    """

    def __init__(self, build: Callable[[type], str]) -> None:
        self.build = build
        self.name = build.__name__

    def __get__(self, instance: Any, owner: type) -> Any:
        try:
            module_ns = sys.modules[owner.__module__].__dict__
        except KeyError:
            module_ns = {}

        global_ns = dict(module_ns, NOTHING=NOTHING, _copy=copy.copy, _defaults=all_defaults(owner, all_clues(owner)))
        local_ns: dict[str, Any] = {}
        exec(self.build(owner), global_ns, local_ns)  # noqa: S102

        method = local_ns[self.name]
        method.__generator__ = self
        setattr(owner, self.name, method)
        return method.__get__(instance, owner)


def all_clues(cls: type) -> dict[str, Any]:
    """Get all annotations of a type across its mro, base classes first, excluding ClassVars."""

    clues = reduce(lambda x, y: {**getattr(y, "__annotations__", {}), **x}, cls.__mro__, {})
    ordered = reduce(lambda x, y: {**x, **getattr(y, "__annotations__", {})}, reversed(cls.__mro__), {})
    return {name: clues[name] for name in ordered if (get_origin(clues[name]) or clues[name]) is not ClassVar}


def all_defaults(cls: type, clues: dict[str, Any]) -> dict[str, Any]:
    """Collect the class-level default values of the given clues, if they exist."""

    defaults: dict[str, Any] = {}
    for name in clues:
        try:
            default = getattr(cls, name)
        except AttributeError:
            continue
        if not isinstance(default, MemberDescriptorType):
            defaults[name] = default
    return defaults


def _nearest_definition(cls: type, name: str) -> Any:
    for klass in cls.__mro__[1:]:
        if name in klass.__dict__:
            return klass.__dict__[name]
    return None


class Datum:
    """Base data structure that creates ``__init__``, ``__repr__``, ``__eq__`` and ``__match_args__`` from the
    class annotations.

    A class may set ``_datum_kw_only`` to a mapping of extra keyword-only parameters and their defaults.
    """

    __slots__ = ()

    _datum_kw_only: ClassVar[dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        for name in _GENERATED_NAMES:
            if name in cls.__dict__:
                continue
            inherited = _nearest_definition(cls, name)
            generator = inherited if isinstance(inherited, generated) else getattr(inherited, "__generator__", None)
            if generator is not None:
                setattr(cls, name, generator)

        cls.__match_args__ = tuple(all_clues(cls))

    @generated
    def __init__(cls: type) -> str:  # pyright: ignore
        clues = all_clues(cls)
        defaults = all_defaults(cls, clues)

        params: list[str] = []
        body: list[str] = []
        for name in clues:
            if name not in defaults:
                params.append(name)
                body.append(f"    self.{name} = {name}")
            elif isinstance(defaults[name], _MUTABLE_DEFAULT_TYPES):
                params.append(f"{name}=NOTHING")
                body.append(f"    self.{name} = {name} if {name} is not NOTHING else _copy(_defaults[{name!r}])")
            else:
                params.append(f"{name}=_defaults[{name!r}]")
                body.append(f"    self.{name} = {name}")

        if cls._datum_kw_only:
            params.append("*")
            for name, default in cls._datum_kw_only.items():
                params.append(f"{name}={default!r}")
                body.append(f"    self.{name} = {name}")

        signature = ", ".join(["self", *params])
        return f"def __init__({signature}):\n" + ("\n".join(body) or "    pass") + "\n"

    @generated
    def __repr__(cls: type) -> str:  # pyright: ignore
        fmt = ", ".join(f"{name}={{self.{name}!r}}" for name in all_clues(cls))
        return f'def __repr__(self):\n    return f"{{type(self).__name__}}({fmt})"\n'

    @generated
    def __eq__(cls: type) -> str:  # pyright: ignore  # noqa: PLE0302
        clues = all_clues(cls)
        selfvals = "".join(f"self.{name}, " for name in clues)
        othervals = "".join(f"other.{name}, " for name in clues)
        return (
            "def __eq__(self, other):\n"
            "    if type(self) is not type(other):\n"
            "        return NotImplemented\n"
            f"    return ({selfvals}) == ({othervals})\n"
        )
