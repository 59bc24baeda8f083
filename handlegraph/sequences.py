"""
Compact DNA sequences.

Short sequences are packed into a single 64-bit word:

    bits 62-63  sequence type tag
    bits 56-61  length
    bits  0-55  nucleotides, position 0 in the lowest bits

Sequences of only a, c, g and t of up to 28 bases use two bits per base
(ShortKnownSequence), other sequences of up to 14 bases use four bits per base
(ShortAmbiguousSequence). Anything longer is a LongSequence, a numpy array of
ShortAmbiguousSequence words.

Because the tag sits in the top two bits a graph store can keep one 64-bit
value per node and decode it on demand with from_long.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, Union

import numpy as np

from .exceptions import InvalidNucleotide, LengthOverflow
from .nucleotides import fold_lower, maybe_gc

BITS_USED_FOR_DNA = 56
TYPE_SHIFT = 62

DNA_MASK = (1 << BITS_USED_FOR_DNA) - 1
HEADER_MASK = ((1 << 64) - 1) ^ DNA_MASK
WORD_MASK = (1 << 64) - 1

# positions included in the content hash
HASHED_PREFIX = 28

BytesLike = Union[bytes, bytearray, memoryview, str]


class SequenceType(Enum):
    SHORT_KNOWN = 0
    SHORT_AMBIGUOUS = 1
    LONG_ID_REFERENCE = 2
    OTHER = 3
    # sequences too long for one word are stored by reference
    LONG = 2

    @property
    def code(self) -> int:
        """The type tag shifted into the top two bits of a word."""
        return self.value << TYPE_SHIFT

    @classmethod
    def from_long(cls, word: int) -> 'SequenceType':
        return cls(variant_of(word))


def variant_of(word: int) -> int:
    """The two bit type tag of a packed sequence word."""
    return (word >> TYPE_SHIFT) & 0b11


def _as_bytes(sequence: BytesLike) -> bytes:
    if isinstance(sequence, str):
        # non ascii characters become '?' and fail as invalid nucleotides
        return sequence.encode('ascii', errors='replace')
    if isinstance(sequence, (bytes, bytearray, memoryview)):
        return bytes(sequence)
    raise TypeError(f'Expected str or bytes, got {type(sequence).__name__}')


class Sequence(ABC):
    """
    An immutable DNA sequence over the IUPAC alphabet.

    Equality compares nucleotides, so sequences of different encodings with the same
    content are equal. Subclasses must provide byte_at, __len__, kind and complement.
    """
    __slots__ = ()

    @abstractmethod
    def byte_at(self, offset: int) -> int:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    @property
    @abstractmethod
    def kind(self) -> SequenceType:
        pass

    @abstractmethod
    def complement(self) -> 'Sequence':
        pass

    def length(self) -> int:
        return len(self)

    def reverse_complement(self) -> 'Sequence':
        """
        Complement every nucleotide in place; the order of the bases is NOT reversed.
        Use flip_strand for the sequence as read from the opposite strand.
        """
        return self.complement()

    def reverse(self) -> 'Sequence':
        return from_bytes(bytes(self)[::-1])

    def flip_strand(self) -> 'Sequence':
        """The biological reverse complement: reversed order and complemented bases."""
        return self.reverse().complement()

    def as_string(self) -> str:
        return bytes(self).decode('ascii')

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset < len(self):
            raise IndexError(f'Offset {offset} out of range for sequence of length {len(self)}')

    def __bytes__(self) -> bytes:
        return bytes(self.byte_at(i) for i in range(len(self)))

    def __getitem__(self, item):
        if isinstance(item, slice):
            return from_bytes(bytes(self)[item])
        if item < 0:
            item += len(self)
        return chr(self.byte_at(item))

    def __iter__(self):
        for i in range(len(self)):
            yield chr(self.byte_at(i))

    def __str__(self) -> str:
        return self.as_string()

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.as_string()!r})'

    def __eq__(self, other) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return equal_by_bytes(self, other)

    def __hash__(self) -> int:
        return sequence_hash(self)


def equal_by_bytes(a: Sequence, b: Sequence) -> bool:
    """True if both sequences have the same length and the same nucleotide at every offset."""
    length = len(a)
    if length != len(b):
        return False
    for offset in range(length):
        if a.byte_at(offset) != b.byte_at(offset):
            return False
    return True


def sequence_hash(sequence: Sequence) -> int:
    """
    Content hash valid for every Sequence implementation: the length times the number of
    maybe-GC nucleotides among the first 28 positions. Sequences that only differ after
    position 28 collide; that is the price of a constant time hash.
    """
    length = len(sequence)
    gc = 0
    for offset in range(min(length, HASHED_PREFIX)):
        if maybe_gc(sequence.byte_at(offset)):
            gc += 1
    return length * gc


class ShortKnownSequence(Sequence):
    """Up to 28 nucleotides of a, c, g or t, two bits each, in a single word."""
    __slots__ = ('_value',)

    BITS_PER_NUCLEOTIDE = 2
    MAX_LENGTH = BITS_USED_FOR_DNA // BITS_PER_NUCLEOTIDE
    # a=00 t=01 c=10 g=11: the low bit flips a base to its complement,
    # the high bit is set for c and g
    TOGGLE = int('01' * MAX_LENGTH, 2)
    GC_BITMASK = int('10' * MAX_LENGTH, 2)

    _CODES = {ord(letter): code for code, letter in enumerate('atcg')}
    _LETTERS = b'atcg'

    def __init__(self, sequence: BytesLike):
        self._value = self.encode(sequence)

    @classmethod
    def from_word(cls, word: int) -> 'ShortKnownSequence':
        """Wrap a previously encoded word without validating it."""
        instance = cls.__new__(cls)
        instance._value = word & WORD_MASK
        return instance

    @classmethod
    def encode(cls, sequence: BytesLike) -> int:
        sequence = _as_bytes(sequence)
        if len(sequence) > cls.MAX_LENGTH:
            raise LengthOverflow(cls.MAX_LENGTH, len(sequence))
        code = len(sequence) << BITS_USED_FOR_DNA
        for position, nucleotide in enumerate(sequence):
            bits = cls._CODES.get(fold_lower(nucleotide))
            if bits is None:
                raise InvalidNucleotide(position, nucleotide, 'one of a, c, g or t')
            code |= bits << (position * cls.BITS_PER_NUCLEOTIDE)
        return code

    @classmethod
    def can_encode(cls, sequence: bytes) -> bool:
        return len(sequence) <= cls.MAX_LENGTH and all(fold_lower(b) in cls._CODES for b in sequence)

    def as_long(self) -> int:
        return self._value

    def byte_at(self, offset: int) -> int:
        self._check_offset(offset)
        return self._LETTERS[(self._value >> (offset * self.BITS_PER_NUCLEOTIDE)) & 0b11]

    def __len__(self) -> int:
        return (self._value >> BITS_USED_FOR_DNA) & 0b111111

    @property
    def kind(self) -> SequenceType:
        return SequenceType.SHORT_KNOWN

    def complement(self) -> 'ShortKnownSequence':
        # unused slots stay a=00 so equal content keeps an equal word
        used = (1 << (len(self) * self.BITS_PER_NUCLEOTIDE)) - 1
        return ShortKnownSequence.from_word(self._value ^ (self.TOGGLE & used))

    def __eq__(self, other) -> bool:
        if isinstance(other, ShortKnownSequence):
            return self._value == other._value
        return super().__eq__(other)

    def __hash__(self) -> int:
        return len(self) * (self._value & self.GC_BITMASK).bit_count()


_A, _T, _C, _G = 0b0001, 0b0010, 0b0100, 0b1000

_AMBIGUOUS_CODES = {
    'a': _A,
    't': _T,
    'c': _C,
    'g': _G,
    'm': _A | _C,
    'r': _A | _G,
    'w': _A | _T,
    's': _C | _G,
    'y': _C | _T,
    'k': _G | _T,
    'v': _A | _C | _G,
    'h': _A | _C | _T,
    'd': _A | _G | _T,
    'b': _C | _G | _T,
    'n': _A | _C | _G | _T,
}


def _gc_nibbles(word: int, count: int) -> int:
    """Number of the first count nibbles of a word that include c or g."""
    gc = 0
    for position in range(count):
        if (word >> (position * 4)) & (_C | _G):
            gc += 1
    return gc


class ShortAmbiguousSequence(Sequence):
    """Up to 14 IUPAC nucleotides, one bit per possible base, in a single word."""
    __slots__ = ('_value',)

    BITS_PER_NUCLEOTIDE = 4
    MAX_LENGTH = BITS_USED_FOR_DNA // BITS_PER_NUCLEOTIDE
    TYPE = SequenceType.SHORT_AMBIGUOUS.code
    # t and g are the high bit of each pair within a nibble, a and c the low bit
    T_OR_G_PATTERN = int('1010' * MAX_LENGTH, 2)
    A_OR_C_PATTERN = int('0101' * MAX_LENGTH, 2)

    _CODES = {ord(letter): bits for letter, bits in _AMBIGUOUS_CODES.items()}
    _LETTERS = {bits: ord(letter) for letter, bits in _AMBIGUOUS_CODES.items()}

    def __init__(self, sequence: BytesLike):
        self._value = self.encode(sequence)

    @classmethod
    def from_word(cls, word: int) -> 'ShortAmbiguousSequence':
        """Wrap a previously encoded word without validating it."""
        instance = cls.__new__(cls)
        instance._value = word & WORD_MASK
        return instance

    @classmethod
    def encode(cls, sequence: BytesLike, start: int = 0, stop: Optional[int] = None) -> int:
        """
        Encode sequence[start:stop] into one word.
        :param sequence: IUPAC DNA, either case
        :param start: first position to encode, reported positions of invalid nucleotides are
        relative to the whole sequence
        :param stop: end of the slice, defaults to the end of the sequence
        :return: the packed word with length and type tag set
        """
        sequence = _as_bytes(sequence)
        stop = len(sequence) if stop is None else stop
        if not 0 <= start <= stop <= len(sequence):
            raise ValueError(f'Invalid slice {start}:{stop} of a sequence of length {len(sequence)}')
        length = stop - start
        if length > cls.MAX_LENGTH:
            raise LengthOverflow(cls.MAX_LENGTH, length)
        code = 0
        for position in range(start, stop):
            nucleotide = sequence[position]
            bits = cls._CODES.get(fold_lower(nucleotide))
            if bits is None:
                raise InvalidNucleotide(position, nucleotide)
            code |= bits << ((position - start) * cls.BITS_PER_NUCLEOTIDE)
        return code | (length << BITS_USED_FOR_DNA) | cls.TYPE

    @classmethod
    def decode_at(cls, word: int, offset: int) -> int:
        bits = (word >> (offset * cls.BITS_PER_NUCLEOTIDE)) & 0b1111
        nucleotide = cls._LETTERS.get(bits)
        if nucleotide is None:
            raise ValueError(f'Word {word:#018x} holds no nucleotide at offset {offset}')
        return nucleotide

    @classmethod
    def complement_word(cls, word: int) -> int:
        """Swap the a and t bits and the c and g bits of every nibble, keep length and tag."""
        dna = ((word << 1) & cls.T_OR_G_PATTERN) | ((word >> 1) & cls.A_OR_C_PATTERN)
        return (word & HEADER_MASK) | dna

    def as_long(self) -> int:
        return self._value

    def byte_at(self, offset: int) -> int:
        self._check_offset(offset)
        return self.decode_at(self._value, offset)

    def __len__(self) -> int:
        return (self._value >> BITS_USED_FOR_DNA) & 0b1111

    @property
    def kind(self) -> SequenceType:
        return SequenceType.SHORT_AMBIGUOUS

    def complement(self) -> 'ShortAmbiguousSequence':
        return ShortAmbiguousSequence.from_word(self.complement_word(self._value))

    def __eq__(self, other) -> bool:
        if isinstance(other, ShortAmbiguousSequence):
            return self._value == other._value
        return super().__eq__(other)

    def __hash__(self) -> int:
        length = len(self)
        return length * _gc_nibbles(self._value, length)


class LongSequence(Sequence):
    """
    Any number of IUPAC nucleotides, 14 per word. Every word is laid out as a
    ShortAmbiguousSequence, the last one holding the remainder.
    """
    __slots__ = ('_words', '_length')

    NUCLEOTIDES_PER_WORD = ShortAmbiguousSequence.MAX_LENGTH

    def __init__(self, sequence: BytesLike):
        sequence = _as_bytes(sequence)
        self._length = len(sequence)
        step = self.NUCLEOTIDES_PER_WORD
        words = [ShortAmbiguousSequence.encode(sequence, start, min(start + step, self._length))
                 for start in range(0, self._length, step)]
        self._words = np.array(words, dtype=np.uint64)
        self._words.setflags(write=False)

    @classmethod
    def from_words(cls, words, length: int) -> 'LongSequence':
        """
        Wrap previously encoded words.
        :param words: sequence of 64-bit words, copied into a read only numpy array
        :param length: number of nucleotides held by the words
        """
        words = np.array(words, dtype=np.uint64)
        required = -(-length // cls.NUCLEOTIDES_PER_WORD)
        if len(words) < required:
            raise ValueError(f'{len(words)} words can not hold {length} nucleotides')
        words.setflags(write=False)
        instance = cls.__new__(cls)
        instance._words = words
        instance._length = length
        return instance

    @property
    def words(self) -> np.ndarray:
        return self._words

    def byte_at(self, offset: int) -> int:
        self._check_offset(offset)
        word = int(self._words[offset // self.NUCLEOTIDES_PER_WORD])
        return ShortAmbiguousSequence.decode_at(word, offset % self.NUCLEOTIDES_PER_WORD)

    def __len__(self) -> int:
        return self._length

    @property
    def kind(self) -> SequenceType:
        return SequenceType.LONG

    def complement(self) -> 'LongSequence':
        words = self._words
        dna = (((words << np.uint64(1)) & np.uint64(ShortAmbiguousSequence.T_OR_G_PATTERN))
               | ((words >> np.uint64(1)) & np.uint64(ShortAmbiguousSequence.A_OR_C_PATTERN)))
        return LongSequence.from_words((words & np.uint64(HEADER_MASK)) | dna, self._length)

    def __bytes__(self) -> bytes:
        decoded = bytearray()
        step = self.NUCLEOTIDES_PER_WORD
        for index, word in enumerate(self._words.tolist()):
            in_word = min(step, self._length - index * step)
            decoded.extend(ShortAmbiguousSequence.decode_at(word, offset) for offset in range(in_word))
        return bytes(decoded)

    def __eq__(self, other) -> bool:
        if isinstance(other, LongSequence):
            if self._length != other._length:
                return False
            if np.array_equal(self._words, other._words):
                return True
        return super().__eq__(other)

    def __hash__(self) -> int:
        if self._length == 0:
            return 0
        # the hashed prefix spans the first two words
        gc = 0
        remaining = min(self._length, HASHED_PREFIX)
        for word in self._words[:2].tolist():
            in_word = min(remaining, self.NUCLEOTIDES_PER_WORD)
            gc += _gc_nibbles(word, in_word)
            remaining -= in_word
        return self._length * gc


def from_bytes(sequence: BytesLike) -> Sequence:
    """
    Encode IUPAC DNA into the smallest fitting representation.
    :param sequence: str or bytes of IUPAC DNA letters, either case
    :return: a ShortKnownSequence, ShortAmbiguousSequence or LongSequence
    """
    sequence = _as_bytes(sequence)
    if ShortKnownSequence.can_encode(sequence):
        return ShortKnownSequence(sequence)
    elif len(sequence) <= ShortAmbiguousSequence.MAX_LENGTH:
        return ShortAmbiguousSequence(sequence)
    else:
        return LongSequence(sequence)


def from_string(sequence: str) -> Sequence:
    if not isinstance(sequence, str):
        raise TypeError(f'Expected str, got {type(sequence).__name__}')
    return from_bytes(sequence)


def from_long(word: int, resolve: Optional[Callable[[int], Sequence]] = None) -> Sequence:
    """
    Decode a 64-bit word as stored by a graph.
    :param word: a packed sequence, or a reference to a sequence stored elsewhere
    :param resolve: called with the low 62 bits of LONG_ID_REFERENCE words to fetch the sequence
    :return: the sequence the word stands for
    """
    kind = SequenceType.from_long(word)
    if kind is SequenceType.SHORT_KNOWN:
        return ShortKnownSequence.from_word(word)
    elif kind is SequenceType.SHORT_AMBIGUOUS:
        return ShortAmbiguousSequence.from_word(word)
    elif kind is SequenceType.LONG_ID_REFERENCE:
        if resolve is None:
            raise ValueError(f'Word {word:#018x} references a long sequence but no resolver was given')
        return resolve(word & ((1 << TYPE_SHIFT) - 1))
    raise ValueError(f'Word {word:#018x} does not hold a sequence')


def long_reference(reference_id: int) -> int:
    """Tag an id so from_long hands it to a resolver."""
    if not 0 <= reference_id < (1 << TYPE_SHIFT):
        raise ValueError(f'Reference id {reference_id} does not fit in 62 bits')
    return SequenceType.LONG_ID_REFERENCE.code | reference_id
