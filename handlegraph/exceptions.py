class HandleGraphError(Exception):
    """Base class for errors raised by handlegraph."""
    pass


class InvalidNucleotide(HandleGraphError, ValueError):
    """Raised when a byte outside the IUPAC DNA alphabet is encoded."""
    def __init__(self, position: int, found: int, allowed: str = 'IUPAC DNA'):
        self.position = position
        self.found = found
        super().__init__(f"Invalid nucleotide {chr(found)!r} at position {position}, expected {allowed}")


class LengthOverflow(HandleGraphError, ValueError):
    """Raised when an input does not fit into a fixed capacity encoding."""
    def __init__(self, capacity: int, length: int):
        self.capacity = capacity
        self.length = length
        super().__init__(f"Sequence of length {length} exceeds capacity {capacity}")


class Exhausted(HandleGraphError, LookupError):
    """Raised by next() on an iterator without remaining elements."""
    pass


class NotOnEdge(HandleGraphError, ValueError):
    """Raised when traversing an edge from a node that does not participate in it."""
    pass
