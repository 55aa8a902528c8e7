"""Ergonomic single-key selectors for menu entries.

Keys are ordered home row first, then top row, then bottom row, so the most
frequently listed entries land under resting fingers.
"""

from __future__ import annotations

from enum import Enum

from .errors import ConfigurationError

SELECT_KEY = "0"
QUIT_KEY = "8"
UP_KEY = "9"
RESERVED_KEYS = frozenset({SELECT_KEY, QUIT_KEY, UP_KEY})


class Layout(Enum):
    QWERTY = "qwerty"
    COLEMAK = "colemak"
    COLEMAK_DH = "colemak-dh"
    COLEMAK_DH_ISO = "colemak-dh-iso"
    DVORAK = "dvorak"


DEFAULT_LAYOUT = Layout.QWERTY

LAYOUT_KEYS: dict[Layout, tuple[str, ...]] = {
    Layout.QWERTY: tuple("asdfghjkl;" "qwertyuiop" "zxcvbnm,./"),
    Layout.COLEMAK: tuple("arstdhneio" "qwfpgjluy;" "zxcvbkm,./"),
    Layout.COLEMAK_DH: tuple("arstgmneio" "qwfpbjluy;" "xcdvzkh,./"),
    Layout.COLEMAK_DH_ISO: tuple("arstgmneio" "qwfpbjluy;" "zxcdvkh,."),
    Layout.DVORAK: tuple("aoeuidhtns" "-<>pyfgcrl" ";qjkxbmwvz"),
}


def available_layout_names() -> list[str]:
    """Return configuration names of all supported layouts."""
    return [layout.value for layout in Layout]


def parse_layout(name: str) -> Layout:
    """Resolve a configuration name such as ``colemak-dh`` to a ``Layout``."""
    normalized = str(name).strip().lower()
    for layout in Layout:
        if layout.value == normalized:
            return layout
    raise ConfigurationError(
        f"Unknown keyboard layout {name!r} (expected one of: {', '.join(available_layout_names())})."
    )


class KeyMap:
    """Immutable index <-> key mapping for one layout."""

    def __init__(self, keys: tuple[str, ...] | list[str], layout: Layout | None = None) -> None:
        keys = tuple(keys)
        if not keys:
            raise ConfigurationError("Key layout must define at least one key.")
        for key in keys:
            if len(key) != 1:
                raise ConfigurationError(f"Layout key {key!r} is not a single character.")
            if key in RESERVED_KEYS:
                raise ConfigurationError(f"Layout key {key!r} collides with a reserved action key.")
        if len(set(keys)) != len(keys):
            duplicates = sorted({key for key in keys if keys.count(key) > 1})
            raise ConfigurationError(f"Layout defines duplicate keys: {' '.join(duplicates)}")

        self._keys = keys
        self._index_by_key = {key: index for index, key in enumerate(keys)}
        self.layout = layout

    @classmethod
    def for_layout(cls, layout: Layout | str = DEFAULT_LAYOUT) -> KeyMap:
        """Key map for a layout given as enum or configuration name."""
        if isinstance(layout, str):
            layout = parse_layout(layout)
        return cls(LAYOUT_KEYS[layout], layout=layout)

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def assign(self, index: int) -> str:
        """Return the selector key for entry ``index``.

        Callers only ask for indexes below ``len(self)``; anything else is a
        programming error.
        """
        if not 0 <= index < len(self._keys):
            raise IndexError(f"key index {index} outside 0..{len(self._keys) - 1}")
        return self._keys[index]

    def reverse_lookup(self, key: str) -> int | None:
        """Return the entry index bound to ``key``, or ``None``."""
        return self._index_by_key.get(key)
