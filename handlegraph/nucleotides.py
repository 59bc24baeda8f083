"""
The 15 letter IUPAC DNA alphabet, as ASCII bytes.

All functions take and return ASCII codes (ints), the same values found
when indexing a ``bytes`` object.
"""

IUPAC_CODES = b'atcgmrwsykvhdbn'

_LOWERCASE_BIT = 0b00100000

_COMPLEMENTS = {
    ord('a'): ord('t'),
    ord('t'): ord('a'),
    ord('c'): ord('g'),
    ord('g'): ord('c'),
    ord('m'): ord('k'),
    ord('k'): ord('m'),
    ord('r'): ord('y'),
    ord('y'): ord('r'),
    ord('v'): ord('b'),
    ord('b'): ord('v'),
    ord('h'): ord('d'),
    ord('d'): ord('h'),
    ord('w'): ord('w'),
    ord('s'): ord('s'),
    ord('n'): ord('n'),
}

# codes that can not stand for c or g
_NEVER_GC = frozenset(b'atw')


def fold_lower(nucleotide: int) -> int:
    """Force an ASCII letter to lowercase by setting bit 0x20."""
    return nucleotide | _LOWERCASE_BIT


def is_iupac(nucleotide: int) -> bool:
    return fold_lower(nucleotide) in _COMPLEMENTS


def complement(nucleotide: int) -> int:
    """
    Complement of a single nucleotide, always lowercase.
    :param nucleotide: ASCII code of an IUPAC DNA letter, either case
    :return: ASCII code of the complementary letter; w, s and n are their own complement
    """
    folded = fold_lower(nucleotide)
    if folded not in _COMPLEMENTS:
        raise ValueError(f'Not an IUPAC DNA code: {nucleotide!r}')
    return _COMPLEMENTS[folded]


def maybe_gc(nucleotide: int) -> bool:
    """True if the code could stand for a c or a g, taking ambiguity codes into account."""
    folded = fold_lower(nucleotide)
    return folded in _COMPLEMENTS and folded not in _NEVER_GC


def string_can_be_dna_sequence(s) -> bool:
    """True if every letter of a str or bytes object is a lowercase IUPAC DNA code."""
    if isinstance(s, str):
        s = s.encode('ascii', errors='replace')
    return all(b in _COMPLEMENTS for b in s)
