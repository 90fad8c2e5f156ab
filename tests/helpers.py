"""Shared fixtures for roagen tests."""

import tempfile
from pathlib import Path
from typing import Dict, Optional

from roagen.generators.dataset import FixedClock

NOW = 1700000000
CLOCK = FixedClock(NOW)

FILTER_HEADER = """# IPv4 filter
# Nr  Action  Prefix  MinLen  MaxLen  Comment
"""


class RegistryBuilder:
    """Build a throwaway registry checkout on disk"""

    def __init__(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        for directory in ("data/route", "data/route6"):
            (self.root / directory).mkdir(parents=True)
        self.write_filters("", "")

    def cleanup(self):
        self._tmp.cleanup()

    def write_filters(self, filter4: str, filter6: str):
        (self.root / "data/filter.txt").write_text(FILTER_HEADER + filter4)
        (self.root / "data/filter6.txt").write_text(filter6)

    def add_route(self, name: str, text: str, family: int = 4) -> Path:
        directory = "data/route" if family == 4 else "data/route6"
        path = self.root / directory / name
        path.write_text(text)
        return path

    def add_routes(self, routes: Dict[str, str], family: int = 4):
        for name, text in routes.items():
            self.add_route(name, text, family)


def route_object(prefix: str, *origins: str, max_length: Optional[str] = None,
                 attribute: str = "route:") -> str:
    lines = [f"{attribute:<20}{prefix}", "descr:              test route"]
    lines.extend(f"origin:             {origin}" for origin in origins)
    if max_length is not None:
        lines.append(f"max-length:         {max_length}")
    lines.append("mnt-by:             TEST-MNT")
    lines.append("source:             TEST")
    return "\n".join(lines) + "\n"
