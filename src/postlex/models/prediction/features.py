"""
Context builders: turn a phone and its syllable into a predictor query.

Builders are registered by name at import time and picked from the
configuration (PronunciationConfig.context_builder). The registry is only
read after import, so it can be shared across threads.
"""
from typing import Any, Callable, Dict, List

from postlex.schema import PhoneNode, SyllableNode

Context = Dict[str, Any]
ContextBuilder = Callable[[PhoneNode, SyllableNode], Context]

EDGE = "_"

_BUILDERS: Dict[str, ContextBuilder] = {}


def register_context_builder(name: str) -> Callable[[ContextBuilder], ContextBuilder]:
    def decorator(fn: ContextBuilder) -> ContextBuilder:
        if name in _BUILDERS:
            raise ValueError(f"Context builder already registered: {name}")
        _BUILDERS[name] = fn
        return fn
    return decorator


def get_context_builder(name: str) -> ContextBuilder:
    try:
        return _BUILDERS[name]
    except KeyError:
        known = ", ".join(sorted(_BUILDERS))
        raise KeyError(f"Unknown context builder {name!r} (known: {known})") from None


def list_context_builders() -> List[str]:
    return sorted(_BUILDERS)


@register_context_builder("phone_only")
def phone_only(phone: PhoneNode, syllable: SyllableNode) -> Context:
    return {"phone": phone.symbol}


@register_context_builder("phone_window")
def phone_window(phone: PhoneNode, syllable: SyllableNode) -> Context:
    """
    Phone plus its neighbours inside the syllable.

    Built from the live phone list, so phones inserted or rewritten earlier in
    the same pass are visible here.
    """
    phones = syllable.phones
    index = syllable.index_of(phone)
    return {
        "phone": phone.symbol,
        "prev_phone": phones[index - 1].symbol if index > 0 else EDGE,
        "next_phone": phones[index + 1].symbol if index + 1 < len(phones) else EDGE,
        "pos_in_syllable": index,
        "syllable_size": len(phones),
        "stress": syllable.stress.value,
        "accent": syllable.accent,
    }
