"""Game Boy Advance asset conversion: tiles, palettes, fonts, PNG, LZ/RL compression, AIFF samples and C arrays."""

__version__ = "0.1.0"