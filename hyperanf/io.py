"""Edge list input and per-round CSV output."""

import csv
import logging

from hyperanf.errors import EdgeListError

logger = logging.getLogger(__name__)

COMMENT = "#"


def parse_edges(lines):
    """
    Yield (a, b) pairs from whitespace-separated lines, skipping comments and blank lines.

    Lines may be str or UTF-8 encoded bytes.
    """
    for line_number, line in enumerate(lines, start=1):
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as e:
                raise EdgeListError(f"invalid UTF-8 ({e.reason})", line_number) from None
        if line.startswith(COMMENT) or not line.strip():
            continue
        fields = line.split()
        if len(fields) < 2:
            raise EdgeListError(f"expected two node identifiers, got {line.strip()!r}", line_number)
        try:
            a, b = int(fields[0]), int(fields[1])
        except ValueError:
            raise EdgeListError(f"unparseable node identifier in {line.strip()!r}", line_number) from None
        if a < 0 or b < 0:
            raise EdgeListError(f"negative node identifier in {line.strip()!r}", line_number)
        yield a, b


def read_edges(path):
    with open(path, "rb") as f:
        edges = list(parse_edges(f))
    logger.info("Read %d edges from %s", len(edges), path)
    return edges


class CsvRoundWriter:
    """Writes rounds as `round,node,estimate` rows. The file is opened at the first write."""

    def __init__(self, path):
        self.path = path
        self._file = None
        self._writer = None

    def write(self, snapshot):
        if self._file is None:
            self._file = open(self.path, "w", newline="")
            self._writer = csv.writer(self._file)
        self._writer.writerows(snapshot.records())
        self._file.flush()

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
