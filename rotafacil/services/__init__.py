# rotafacil/services/__init__.py
"""Regras de negócio: extrator de listas ECT, rota e exportação."""
