from typing import NamedTuple, Optional

LOAD = 'R'
STORE = 'W'


class Access(NamedTuple):
    op: str
    address: int
    value: Optional[int] = None


def parse_access(line):
    """Parse one trace line; returns None for blanks, comments and junk.

    Accepted forms: ``R <addr>``, ``W <addr> [value]`` or a bare ``<addr>``
    (a load). Numbers may be decimal or carry a 0x / 0o / 0b prefix.
    """
    s = line.strip()
    if not s or s.startswith('#'):
        return None
    parts = s.split()
    op = LOAD
    if parts[0].upper() in (LOAD, STORE):
        op = parts.pop(0).upper()
    if not parts:
        return None
    try:
        address = int(parts[0], 0)
    except ValueError:
        # bare hex without prefix, e.g. "1a3c"
        try:
            address = int(parts[0], 16)
        except ValueError:
            return None
    value = None
    if op == STORE and len(parts) > 1:
        try:
            value = int(parts[1], 0)
        except ValueError:
            return None
    return Access(op, address, value)


class WorkloadLoader:
    def load_trace(self, path):
        # one access per non-empty line; unparseable lines are skipped
        accesses = []
        with open(path, 'r') as f:
            for line in f:
                access = parse_access(line)
                if access is not None:
                    accesses.append(access)
        return accesses
