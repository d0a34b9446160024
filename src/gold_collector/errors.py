"""Exceptions raised by the gold collector."""


class GoldCollectorError(Exception):
    pass


class MapParseError(GoldCollectorError, ValueError):
    pass


class MalformedHeaderError(MapParseError):
    def __init__(self, line: str, reason: str):
        super().__init__(f"Malformed map header {line!r}: {reason}")
        self.line = line
        self.reason = reason


class InsufficientRowsError(MapParseError):
    def __init__(self, expected: int, found: int):
        super().__init__(f"Map declares {expected} rows but only {found} were provided")
        self.expected = expected
        self.found = found


class UnknownTileError(MapParseError):
    def __init__(self, row: int, column: int, char: str):
        super().__init__(f"Unknown tile {char!r} at row {row}, column {column}")
        self.row = row
        self.column = column
        self.char = char


class SinkUnavailableError(GoldCollectorError, RuntimeError):
    pass


class ConfigError(GoldCollectorError, ValueError):
    pass
