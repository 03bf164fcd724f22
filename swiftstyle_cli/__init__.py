"""swiftstyle: a Swift style conformance checker and fixer."""

__version__ = "0.1.0"
