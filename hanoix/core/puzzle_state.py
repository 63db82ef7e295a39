from __future__ import annotations

from typing import Any, Type, TypeVar

from xtructure import FieldDescriptor, Xtructurable, xtructure_dataclass

T = TypeVar("T")

FieldDescriptor = FieldDescriptor


class PuzzleState(Xtructurable):
    """
    Marker base-class for hanoix states.

    Notes:
    - State and solve-config classes are created via `@state_dataclass`, which makes
      them JAX pytrees that can be jitted, vmapped and indexed along a batch axis.
    - Rod assignments are small integers, so states are stored unpacked.
    """
    pass


def state_dataclass(cls: Type[T] | None = None, **kwargs: Any):
    """
    Decorator used to define a JAX-compatible xtructure dataclass for hanoix states.

    Default behavior:
    - Disables xtructure bitpacking (`bitpack="off"`); a state is a handful of uint8 rod
      indices and is read back on the host after every engine move.
    - Rejects classes that declare only one of `.packed` / `.unpacked`.
    """

    def wrap(target_cls: Type[T]) -> Type[T]:
        call_kwargs = dict(kwargs)
        call_kwargs.setdefault("bitpack", "off")

        if hasattr(target_cls, "packed") ^ hasattr(target_cls, "unpacked"):
            raise ValueError(
                "State class must implement both packing and unpacking (or neither)."
            )

        try:
            dc_cls = xtructure_dataclass(target_cls, **call_kwargs)
        except TypeError:
            # Older xtructure releases do not accept `bitpack=`.
            call_kwargs.pop("bitpack", None)
            dc_cls = xtructure_dataclass(target_cls, **call_kwargs)

        return dc_cls

    if cls is None:
        return wrap
    return wrap(cls)
