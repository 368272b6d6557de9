"""Starter song generation."""

from __future__ import annotations

from chordpro_engine.theory import diatonic_chords, split_key

DEFAULT_TITLE = "Untitled Song"
DEFAULT_KEY = "C"

# Scale degrees (0-based) of the I, IV, V and vi chords
PROGRESSION_DEGREES: tuple[int, ...] = (0, 3, 4, 5)


def generate_template(
    title: str | None = None,
    key: str | None = None,
    subtitle: str | None = None,
    tempo: int | str | None = None,
    time: str | None = None,
) -> str:
    """Generate a starter ChordPro song.

    Parameters
    ----------
    title : str | None
        Song title; defaults to "Untitled Song".
    key : str | None
        Song key; unrecognized or missing keys fall back to C.
    subtitle : str | None
        Optional subtitle directive.
    tempo : int | str | None
        Optional tempo directive.
    time : str | None
        Optional time signature directive (e.g., "3/4").

    Returns
    -------
    str
        ChordPro text with metadata directives, a verse and a chorus whose
        chords follow the I, IV, V and vi degrees of the key.

    Examples
    --------
    >>> print(generate_template("Demo", "G").splitlines()[4])
    [G]Write your [C]first verse [D]lyrics [Em]here
    """
    if not key or split_key(key) is None:
        key = DEFAULT_KEY
    key = key.strip()
    one, four, five, six = (diatonic_chords(key)[degree] for degree in PROGRESSION_DEGREES)

    lines = [f"{{title: {title or DEFAULT_TITLE}}}"]
    if subtitle:
        lines.append(f"{{subtitle: {subtitle}}}")
    lines.append(f"{{key: {key}}}")
    if tempo:
        lines.append(f"{{tempo: {tempo}}}")
    if time:
        lines.append(f"{{time: {time}}}")

    lines += [
        "",
        "[Verse 1]",
        f"[{one}]Write your [{four}]first verse [{five}]lyrics [{six}]here",
        f"[{one}]Add more [{four}]lines as [{five}]needed",
        "",
        "[Chorus]",
        f"[{four}]This is the [{one}]chorus",
        f"[{five}]Sing it [{six}]loud",
        "",
        "[Verse 2]",
        f"[{one}]Second verse [{four}]goes [{five}]here",
        "",
    ]
    return "\n".join(lines)
