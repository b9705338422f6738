# rotafacil/services/ect/__init__.py
"""Extrator de listas de entrega dos Correios (ECT) a partir de texto de OCR."""
from .consulta import montar_consulta
from .modelos import ItemEntrega, Manifesto
from .pipeline import extrair_manifesto

__all__ = ["extrair_manifesto", "montar_consulta", "ItemEntrega", "Manifesto"]
