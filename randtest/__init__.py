"""ChaCha20 keystream generation, statistical randomness tests and their summary reports."""

__version__ = "0.1.0"