"""Note token helpers.

A note is free text. Whitespace-separated tokens carry meaning:

- ``tag``: a manually added tag
- ``tag(a)``: an automatically added tag, owned by the annotation engine
- ``!tag``: explicit exclusion marker read by statistics
- ``@type(id)`` / ``@type``: ad hoc counted annotation

Nothing here validates notes; unknown text is left alone.
"""

from __future__ import annotations

from collections.abc import Callable

AUTO_SUFFIX = "(a)"

FULL_SCAN = "full-scan"
CDA_TRAN = "cda-tran"
NON_EQ = "non-eq"
NON_TRIVIAL = "non-trivial"
CDA_DEP = "cda-dep"
ONESHOT_EASY = "1shot-easy"
ONESHOT_HARD = "1shot-hard"
MSHOT = "mshot"
NO_PHANTOM = "no-phantom"

TAGS: tuple[str, ...] = (
    CDA_TRAN,
    CDA_DEP,
    ONESHOT_EASY,
    ONESHOT_HARD,
    MSHOT,
    NON_EQ,
    NON_TRIVIAL,
    FULL_SCAN,
    NO_PHANTOM,
)


def tokens(note: str) -> list[str]:
    return note.split()


def auto_token(tag: str) -> str:
    return f"{tag}{AUTO_SUFFIX}"


def is_auto_token(token: str) -> bool:
    return token.endswith(AUTO_SUFFIX) and len(token) > len(AUTO_SUFFIX)


def strip_auto(token: str) -> str:
    """``tag(a)`` -> ``tag``; other tokens are returned unchanged."""
    return token[: -len(AUTO_SUFFIX)] if is_auto_token(token) else token


def has_manual_tag(note: str, tag: str) -> bool:
    return tag in tokens(note)


def has_auto_tag(note: str, tag: str) -> bool:
    return auto_token(tag) in tokens(note)


def has_tag(note: str, tag: str) -> bool:
    """True if ``tag`` appears either manually or automatically."""
    toks = tokens(note)
    return tag in toks or auto_token(tag) in toks


def append_note(note: str, more: str) -> str:
    if not note:
        return more
    return note + " " + more


def remove_tokens(note: str, predicate: Callable[[str], bool]) -> str:
    """Drop every token matching ``predicate``. The note is unchanged if none match."""
    toks = tokens(note)
    kept = [t for t in toks if not predicate(t)]
    if len(kept) == len(toks):
        return note
    return " ".join(kept)


def add_auto_tag(note: str, tag: str) -> str:
    """Append ``tag(a)`` unless the tag is already present in either form."""
    if has_tag(note, tag):
        return note
    return append_note(note, auto_token(tag))


def remove_auto_tag(note: str, tag: str) -> str:
    owned = auto_token(tag)
    return remove_tokens(note, lambda t: t == owned)


def set_auto_tag(note: str, tag: str, present: bool) -> str:
    """Add or remove the automatic form of ``tag``. Manual tags are never touched."""
    if present:
        return add_auto_tag(note, tag)
    return remove_auto_tag(note, tag)


def base_tags(note: str) -> set[str]:
    """Tags of a note with the auto suffix stripped, excluding ``!`` and ``@`` tokens."""
    return {strip_auto(t) for t in tokens(note) if not t.startswith(("!", "@"))}


def replace_auto_tag(note: str, family: Callable[[str], bool], tag: str) -> str:
    """Make ``tag(a)`` the only automatic token whose tag belongs to ``family``.

    The note is returned unchanged when it already is.
    """

    def owned(token: str) -> bool:
        return is_auto_token(token) and family(strip_auto(token))

    wanted = auto_token(tag)
    if [t for t in tokens(note) if owned(t)] == [wanted]:
        return note
    return append_note(remove_tokens(note, owned), wanted)


def remove_auto_family(note: str, family: Callable[[str], bool]) -> str:
    """Drop every automatic token whose tag belongs to ``family``."""
    return remove_tokens(note, lambda t: is_auto_token(t) and family(strip_auto(t)))
