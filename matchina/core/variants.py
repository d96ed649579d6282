# matchina/core/variants.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from matchina.core.errors import CastError, UnhandledVariantError, ValidationError

DEFAULT_CASE = "_"
_RESERVED_TAG_PROPS = frozenset({"data", "is_", "as_", "match", "get_tag"})


def match_case(cases: Mapping[str, Callable[..., Any]], key: str, *params: Any, exhaustive: bool = True) -> Any:
    """
    Dispatch ``key`` to its handler in ``cases``, falling back to the ``_`` handler.

    :param cases: Mapping of key to handler.
    :param key: The key to dispatch on.
    :param params: Arguments passed to the selected handler.
    :param exhaustive: If True, a missing handler raises instead of returning None.
    :raises UnhandledVariantError: If no handler applies and ``exhaustive`` is set.
    """
    handler = cases.get(key)
    if handler is None:
        handler = cases.get(DEFAULT_CASE)
    if handler is None:
        if exhaustive:
            raise UnhandledVariantError(key)
        return None
    return handler(*params)


class Variant:
    """
    One member of a closed family of tagged values. The tag is stored under the
    factory's tag attribute (``tag`` by default, ``key`` for states).
    """

    def __init__(self, tag: str, data: Any, tag_prop: str = "tag") -> None:
        self._tag = tag
        self._tag_prop = tag_prop
        self.data = data
        setattr(self, tag_prop, tag)

    def get_tag(self) -> str:
        return self._tag

    def is_(self, tag: str) -> bool:
        """Return True if this instance carries ``tag``."""
        return self._tag == tag

    def as_(self, tag: str) -> "Variant":
        """
        Return this instance unchanged if it carries ``tag``.

        :raises CastError: If the instance carries a different tag.
        """
        if not self.is_(tag):
            raise CastError(expected=tag, actual=self._tag)
        return self

    def match(self, handlers: Mapping[str, Callable[[Any], Any]], exhaustive: bool = True) -> Any:
        """
        Invoke the handler for this instance's tag with its data and return the result.

        :param handlers: Mapping of tag to handler; ``_`` is the default handler.
        :param exhaustive: If False, an unhandled tag returns None instead of raising.
        :raises UnhandledVariantError: If exhaustive and no handler applies.
        """
        return match_case(handlers, self._tag, self.data, exhaustive=exhaustive)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Variant):
            return NotImplemented
        return (self._tag_prop, self._tag, self.data) == (other._tag_prop, other._tag, other.data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._tag_prop}={self._tag!r}, data={self.data!r})"


VariantSpec = Union[None, Callable[..., Any], Any]


class VariantFactory:
    """
    Holds one constructor per variant name. Constructors are reachable as
    attributes (``factory.Red()``) or items (``factory["Red"]()``).
    """

    variant_class = Variant

    def __init__(self, spec: Union[Mapping[str, VariantSpec], Sequence[str]], tag_prop: str = "tag") -> None:
        """
        :param spec: Mapping of variant name to ``None`` (empty data), a data
            constructor, or a constant data value. A sequence of names builds
            constructors taking a single optional data argument.
        :param tag_prop: Attribute name the tag is stored under.
        :raises ValidationError: If the tag attribute or a variant name is reserved.
        """
        if tag_prop in _RESERVED_TAG_PROPS or tag_prop.startswith("_"):
            raise ValidationError(f"Tag property '{tag_prop}' is reserved")
        self.tag_prop = tag_prop
        self._constructors: Dict[str, Callable[..., Variant]] = {}

        if isinstance(spec, Mapping):
            items = list(spec.items())
        else:
            items = [(name, _identity) for name in spec]

        for name, entry in items:
            if name == DEFAULT_CASE:
                raise ValidationError(f"Variant name '{DEFAULT_CASE}' is reserved for default handlers")
            self._constructors[name] = self._make_constructor(name, entry)

    def _make_constructor(self, name: str, entry: VariantSpec) -> Callable[..., Variant]:
        variant_class = self.variant_class
        tag_prop = self.tag_prop

        if entry is None:

            def construct(*args: Any, **kwargs: Any) -> Variant:
                return variant_class(name, {}, tag_prop)

        elif callable(entry):

            def construct(*args: Any, **kwargs: Any) -> Variant:
                return variant_class(name, entry(*args, **kwargs), tag_prop)

        else:

            def construct(*args: Any, **kwargs: Any) -> Variant:
                return variant_class(name, entry, tag_prop)

        construct.__name__ = name
        construct.__qualname__ = f"{type(self).__name__}.{name}"
        construct.spec = entry
        return construct

    def __getattr__(self, name: str) -> Callable[..., Variant]:
        constructors = self.__dict__.get("_constructors", {})
        try:
            return constructors[name]
        except KeyError:
            raise AttributeError(name) from None

    def __getitem__(self, name: str) -> Callable[..., Variant]:
        return self._constructors[name]

    def __contains__(self, name: object) -> bool:
        return name in self._constructors

    def __iter__(self) -> Iterator[str]:
        return iter(self._constructors)

    def __len__(self) -> int:
        return len(self._constructors)

    def keys(self) -> List[str]:
        return list(self._constructors)

    def get(self, name: str) -> Optional[Callable[..., Variant]]:
        return self._constructors.get(name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self._constructors)})"


def _identity(data: Any = None) -> Any:
    return {} if data is None else data


def define_variants(spec: Union[Mapping[str, VariantSpec], Sequence[str]], tag_prop: str = "tag") -> VariantFactory:
    """
    Build a closed family of tagged value constructors.

    :param spec: Mapping of variant name to its data spec, or a sequence of names.
    :param tag_prop: Attribute name the tag is stored under.
    """
    return VariantFactory(spec, tag_prop)
