# matchina/plugins/effects.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from matchina.core.variants import VariantFactory, VariantSpec, define_variants

EFFECT_TAG = "effect"


def define_effects(spec: Union[Mapping[str, VariantSpec], Sequence[str]]) -> VariantFactory:
    """Define a family of effect descriptions, tagged on ``effect``."""
    return define_variants(spec, tag_prop=EFFECT_TAG)


def handle_effects(
    effects: Optional[Iterable[Any]], handlers: Mapping[str, Callable[[Any], Any]], exhaustive: bool = False
) -> None:
    """
    Match each effect against ``handlers`` in order. ``None`` means no effects.

    :raises UnhandledVariantError: If exhaustive and an effect has no handler.
    """
    if not effects:
        return
    for effect in effects:
        effect.match(handlers, exhaustive)
