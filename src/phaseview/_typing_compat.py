"""Shim for typing names that are missing from older interpreters at runtime."""

import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

__all__ = ("Self", "TypeAlias", "override")


_T = TypeVar("_T", bound=Callable[..., Any])


if sys.version_info >= (3, 12):  # pragma: >=3.12 cover
    from typing import override
elif TYPE_CHECKING:
    from typing_extensions import override
else:  # pragma: <3.12 cover

    def override(arg: _T) -> _T:
        try:
            arg.__override__ = True
        except AttributeError:  # pragma: no cover
            pass
        return arg


if sys.version_info >= (3, 11):  # pragma: >=3.11 cover
    from typing import Self
elif TYPE_CHECKING:
    from typing_extensions import Self
else:  # pragma: <3.11 cover

    class Self:
        pass


if sys.version_info >= (3, 10):  # pragma: >=3.10 cover
    from typing import TypeAlias
elif TYPE_CHECKING:
    from typing_extensions import TypeAlias
else:  # pragma: <3.10 cover

    class TypeAlias:
        pass
