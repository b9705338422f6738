# rotafacil/services/ect/segmentador.py
import re
from typing import List, Optional

from .modelos import LinhaBruta

QUEBRA_LINHA = re.compile(r'\r\n|\n|\r')
TAMANHO_MINIMO = 3


def segmentar_linhas(texto: Optional[str]) -> List[LinhaBruta]:
    """
    Divide o texto do OCR em linhas limpas.

    Aceita quebras \\r\\n, \\n e \\r. Linhas vazias ou com menos de 3
    caracteres são descartadas, mas o índice original é mantido para
    diagnóstico.
    """
    if not texto:
        return []
    linhas = []
    for indice, bruta in enumerate(QUEBRA_LINHA.split(texto)):
        linha = bruta.strip()
        if len(linha) < TAMANHO_MINIMO:
            continue
        linhas.append(LinhaBruta(texto=linha, indice=indice))
    return linhas
