"""
Word Tree: word -> syllable -> phone structure handled by the pronunciation stage.

Ownership:
- parse: creates syllables and phones from WordNode.transcription
- rules / prediction: edit the phone lists in place
- rollup: rewrites SyllableNode.transcription and WordNode.transcription

Attributes read by later stages:
- stress ("", "1", "2"), accent, transcription, and symbol on each phone

Notes:
- PhoneNode compares by identity. Two phones with the same symbol are different
  nodes, and every list edit below looks nodes up with `is`, never with `==`.
- SyllableNode.transcription is only authoritative right after a rollup.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Stress(str, Enum):
    """Syllable stress. The value is the attribute value exposed downstream."""
    NONE = ""
    PRIMARY = "1"
    SECONDARY = "2"

    @property
    def marker(self) -> str:
        """Transcription prefix for this stress level."""
        return _STRESS_MARKERS[self]

    @classmethod
    def from_marker(cls, char: str) -> "Stress":
        for stress, marker in _STRESS_MARKERS.items():
            if marker and marker == char:
                return stress
        return cls.NONE


_STRESS_MARKERS = {
    Stress.NONE: "",
    Stress.PRIMARY: "'",
    Stress.SECONDARY: ",",
}

STRESS_MARKERS = frozenset(m for m in _STRESS_MARKERS.values() if m)


@dataclass(eq=False)
class PhoneNode:
    """
    One phoneme occurrence.

    Fields:
    - symbol: canonical phoneme label (rewritten or removed by prediction)
    """
    symbol: str

    def to_dict(self) -> Dict[str, Any]:
        return {"p": self.symbol}


@dataclass(eq=False)
class SyllableNode:
    """
    One syllable of a word.

    Fields:
    - stress: Stress level, taken from the leading marker of the source text
    - accent: inherited from the word, only when stress is PRIMARY
    - transcription: flat phone string of this syllable (rollup)
    - phones: ordered phone nodes owned by this syllable
    """
    stress: Stress = Stress.NONE
    accent: Optional[str] = None
    transcription: str = ""
    phones: List[PhoneNode] = field(default_factory=list)

    def snapshot(self) -> Tuple[PhoneNode, ...]:
        """Copy of the current phone identities, safe to iterate while editing."""
        return tuple(self.phones)

    def index_of(self, phone: PhoneNode) -> int:
        for i, candidate in enumerate(self.phones):
            if candidate is phone:
                return i
        raise ValueError(f"Phone {phone.symbol!r} is not part of this syllable")

    def append_phone(self, phone: PhoneNode) -> None:
        self.phones.append(phone)

    def insert_before(self, new_phone: PhoneNode, ref_phone: PhoneNode) -> None:
        """Insert new_phone immediately before ref_phone."""
        self.phones.insert(self.index_of(ref_phone), new_phone)

    def remove_phone(self, phone: PhoneNode) -> None:
        del self.phones[self.index_of(phone)]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "stress": self.stress.value,
            "ph": self.transcription,
            "phones": [p.to_dict() for p in self.phones],
        }
        if self.accent is not None:
            data["accent"] = self.accent
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SyllableNode":
        return cls(
            stress=Stress(data.get("stress", "")),
            accent=data.get("accent"),
            transcription=data.get("ph", ""),
            phones=[PhoneNode(symbol=p["p"]) for p in data.get("phones", [])],
        )


@dataclass(eq=False)
class WordNode:
    """
    One orthographic token being processed.

    Fields:
    - transcription: flat phoneme string, syllables separated by "-",
      each syllable optionally prefixed with "'" (primary) or "," (secondary)
    - accent: prosodic accent tag (accented words only)
    - text: orthographic token (diagnostics only)
    - syllables: ordered syllables, empty until parsed
    """
    transcription: str
    accent: Optional[str] = None
    text: Optional[str] = None
    syllables: List[SyllableNode] = field(default_factory=list)

    def phone_count(self) -> int:
        return sum(len(s.phones) for s in self.syllables)

    def describe(self) -> str:
        """Short label for log lines."""
        if self.text:
            return f"{self.text!r} [{self.transcription}]"
        return f"[{self.transcription}]"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.text is not None:
            data["text"] = self.text
        data["ph"] = self.transcription
        if self.accent is not None:
            data["accent"] = self.accent
        data["syllables"] = [s.to_dict() for s in self.syllables]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordNode":
        """
        Accepts the flat input form ({"text", "transcription", "accent"})
        and the tree form written by to_dict() ({"text", "ph", "accent", "syllables"}).
        """
        if "transcription" in data:
            transcription = data["transcription"]
        else:
            transcription = data.get("ph", "")
        return cls(
            transcription=transcription,
            accent=data.get("accent"),
            text=data.get("text"),
            syllables=[SyllableNode.from_dict(s) for s in data.get("syllables", [])],
        )
