"""Receipt extraction on top of Azure AI Document Intelligence."""

__version__ = "0.1.0"
