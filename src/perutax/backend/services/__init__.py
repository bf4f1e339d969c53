"""Service-layer helpers for the PeruTax backend."""

from .calculation_service import calculate_tax
from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "calculate_tax",
    "parse_calculation_payload",
    "build_calculation_response",
]
