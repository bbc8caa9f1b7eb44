"""Exceptions raised by hyperanf."""


class HyperANFError(Exception):
    """Base class for all hyperanf errors."""


class GraphError(HyperANFError, ValueError):
    """The adjacency structure is malformed (unknown neighbour, asymmetric edge, bad identifier)."""


class IncompatibleSketchError(HyperANFError, ValueError):
    """Two sketches with different precision or hash seed were combined."""


class EdgeListError(HyperANFError, ValueError):
    """A record of an edge list could not be parsed."""

    def __init__(self, message, line_number=None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
