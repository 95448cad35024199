"""End-to-end pipeline: text or block JSON in, HTML out."""

from blockpress.processor.core import convert
from blockpress.processor.models import LAYOUTS, ConversionResult

__all__ = ["convert", "ConversionResult", "LAYOUTS"]
