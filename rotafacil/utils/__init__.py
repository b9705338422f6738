# rotafacil/utils/__init__.py
