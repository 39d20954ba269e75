"""YGO Price Extractor: Yu-Gi-Oh! card price lookup and batch price reports."""

__version__ = "0.1.0"
