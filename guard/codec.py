"""Filename codec for TUNIC save files.

On disk a save is named ``<slot_name>[~<generation:012d>].tunic``. The suffix is
absent for generation 0. Slot names must not contain ``~`` themselves; names
that do are rejected rather than escaped.

Decoding only accepts the canonical rendering of a generation, so every valid
filename maps to exactly one :class:`Save` and ``encode`` always reproduces the
name it came from. Anything else (``hero~5``, ``hero~000000000000``,
``hero~-1``) is reported as :class:`MalformedGeneration` and left alone.
"""
from __future__ import annotations

import re

from .errors import InvalidSlotName, MalformedGeneration
from .types import Save

SAVE_EXTENSION = ".tunic"
GENERATION_DELIMITER = "~"
GENERATION_WIDTH = 12

_DIGITS = re.compile(r"[0-9]+")


def is_save_filename(name: str) -> bool:
    return name.endswith(SAVE_EXTENSION)


def _format_generation(generation: int) -> str:
    return f"{generation:0{GENERATION_WIDTH}d}"


def decode(filename: str) -> Save:
    """Decode *filename* into a :class:`Save`, raising ``DecodeError`` when it is not valid."""

    if not is_save_filename(filename):
        raise InvalidSlotName(filename, f"missing {SAVE_EXTENSION} extension")
    stem = filename[: -len(SAVE_EXTENSION)]
    delimiter = stem.rfind(GENERATION_DELIMITER)
    if delimiter == -1:
        slot_name, generation = stem, 0
    else:
        slot_name, suffix = stem[:delimiter], stem[delimiter + 1 :]
        if not _DIGITS.fullmatch(suffix):
            raise MalformedGeneration(
                filename,
                f"generation suffix {suffix!r} is not a number",
                slot_name=slot_name,
            )
        generation = int(suffix)
        if generation == 0 or suffix != _format_generation(generation):
            raise MalformedGeneration(
                filename,
                f"generation suffix {suffix!r} is not in canonical form",
                slot_name=slot_name,
                generation=generation,
            )
    if not slot_name:
        raise InvalidSlotName(filename, "empty slot name", generation=generation)
    if GENERATION_DELIMITER in slot_name:
        raise InvalidSlotName(
            filename,
            f"slot name {slot_name!r} contains {GENERATION_DELIMITER!r}",
            slot_name=slot_name,
            generation=generation,
        )
    return Save(slot_name, generation)


def encode(save: Save) -> str:
    """Render *save* as the filename it is stored under."""

    if not save.slot_name or GENERATION_DELIMITER in save.slot_name:
        raise InvalidSlotName(save.slot_name, "slot name cannot be encoded", slot_name=save.slot_name)
    if save.generation < 0:
        raise ValueError(f"generation must be non-negative, got {save.generation}")
    if save.generation == 0:
        return f"{save.slot_name}{SAVE_EXTENSION}"
    return f"{save.slot_name}{GENERATION_DELIMITER}{_format_generation(save.generation)}{SAVE_EXTENSION}"


__all__ = [
    "GENERATION_DELIMITER",
    "GENERATION_WIDTH",
    "SAVE_EXTENSION",
    "decode",
    "encode",
    "is_save_filename",
]
