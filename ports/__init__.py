from .http import HttpResponsePort, HttpSessionPort
from .random_source import RandomSource

__all__ = [
    "HttpResponsePort",
    "HttpSessionPort",
    "RandomSource",
]
