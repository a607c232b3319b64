"""
API module exposing the REST interface.
"""

from .rest_api import CcrmRestAPI

__all__ = [
    "CcrmRestAPI",
]
