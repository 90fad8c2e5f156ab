"""
RPSL Route Object Parser

Extracts the attributes roagen needs from the text of one route or route6
object:

    route:      172.20.0.0/24
    origin:     AS4242420000
    max-length: 28

Continuation lines (leading whitespace) and attributes other than route,
route6, origin and max-length are ignored. Attribute names match
case-insensitively; origins are stored uppercased.
"""

import logging
from typing import List, Optional

from ..models import RouteRecord
from ..utils.error_handling import MaxLengthError, MissingRouteError

MAX_LENGTH_LIMIT = 255


class RouteObjectParser:
    """
    Parser for RPSL route and route6 objects.

    A route attribute may appear more than once; the last one wins. Every
    origin attribute is kept, in order, including duplicates.
    """

    ROUTE_ATTRIBUTES = ("route:", "route6:")
    ORIGIN_ATTRIBUTE = "origin:"
    MAX_LENGTH_ATTRIBUTE = "max-length:"

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def parse(self, text: str, source: Optional[str] = None) -> RouteRecord:
        """
        Parse one route object.

        Args:
            text: Full text of the object
            source: Name of the object (file name), carried into errors

        Returns:
            RouteRecord with raw prefix text, origins and optional max length

        Raises:
            MaxLengthError: max-length value is not a valid length
            MissingRouteError: no route or route6 attribute present
        """
        prefix: Optional[str] = None
        origins: List[str] = []
        max_length: Optional[int] = None

        for line in text.split("\n"):
            if line[:1].isspace():
                continue

            tokens = line.lower().split()
            if len(tokens) < 2:
                continue

            attribute, value = tokens[0], tokens[1]

            if attribute in self.ROUTE_ATTRIBUTES:
                prefix = value
            elif attribute == self.ORIGIN_ATTRIBUTE:
                origins.append(value.upper())
            elif attribute == self.MAX_LENGTH_ATTRIBUTE:
                max_length = self._parse_max_length(value, source)

        if prefix is None:
            raise MissingRouteError(source)

        return RouteRecord(
            prefix=prefix,
            origins=tuple(origins),
            max_length=max_length,
            source=source,
        )

    def _parse_max_length(self, value: str, source: Optional[str]) -> int:
        if not value.isascii() or not value.isdigit():
            raise MaxLengthError(value, source)

        max_length = int(value)
        if max_length > MAX_LENGTH_LIMIT:
            raise MaxLengthError(value, source)

        return max_length
