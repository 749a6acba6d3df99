from typing import List, Optional

from duesoon.models import Tone


def build_tone_sequence(count: int, fallback: Tone = Tone.GENTLE) -> List[Tone]:
    """Erzeuge eine Startsequenz mit mindestens einem Eintrag."""
    return [fallback] * max(1, count)


def resize_tone_sequence(current: List[Tone], target_length: int) -> List[Tone]:
    """
    Passe die Tonfall-Sequenz an eine neue Länge an:
      - gleiche Länge: unverändert zurückgeben
      - länger: auf die ersten `target_length` Einträge kürzen
      - kürzer: hinten mit GENTLE auffüllen
    Die Untergrenze 1 setzt der Aufrufer.
    """
    if len(current) == target_length:
        return current
    if len(current) > target_length:
        return current[:target_length]
    return list(current) + [Tone.GENTLE] * (target_length - len(current))


def tone_for_occurrence(sequence: List[Tone], index: int) -> Tone:
    """Tonfall für den index-ten Termin, zyklisch über die Sequenz."""
    if not sequence:
        return Tone.NEUTRAL
    return sequence[index % len(sequence)]


def coerce_tone(value, default: Optional[Tone] = Tone.GENTLE) -> Optional[Tone]:
    if isinstance(value, Tone):
        return value
    if isinstance(value, str):
        try:
            return Tone(value.strip().lower())
        except ValueError:
            return default
    return default
