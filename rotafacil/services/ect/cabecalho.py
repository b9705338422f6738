# rotafacil/services/ect/cabecalho.py
"""
Leitura dos metadados do cabeçalho da lista ECT (lista, unidade, distrito,
cidade, UF, carteiro e data), independente do parsing dos itens.
"""
from typing import Dict, Optional

from rotafacil.utils.helpers import SIGLAS_UF, titulo_cidade
from . import padroes


def _primeiro_grupo(regex, texto: str) -> Optional[str]:
    match = regex.search(texto)
    return match.group(1).strip() if match else None


def extrair_metadados(texto: Optional[str]) -> Dict[str, Optional[str]]:
    metadados = {
        "list_number": None,
        "unit": None,
        "district": None,
        "city": None,
        "state": None,
        "carrier": None,
        "date": None,
    }
    if not texto:
        return metadados

    metadados["list_number"] = _primeiro_grupo(padroes.LISTA, texto)
    metadados["district"] = _primeiro_grupo(padroes.DISTRITO, texto)
    metadados["carrier"] = _primeiro_grupo(padroes.CARTEIRO, texto)
    metadados["date"] = _primeiro_grupo(padroes.DATA, texto)

    unidade = padroes.UNIDADE.search(texto)
    if unidade:
        metadados["unit"] = f"{unidade.group(1)} - {unidade.group(2).strip()}"

    cidade_uf = padroes.CIDADE_UF.search(texto)
    if cidade_uf and cidade_uf.group(2) in SIGLAS_UF:
        metadados["city"] = titulo_cidade(cidade_uf.group(1))
        metadados["state"] = cidade_uf.group(2)
    else:
        for match in padroes.UF_PAIS.finditer(texto):
            if match.group(1) in SIGLAS_UF:
                metadados["state"] = match.group(1)
                break

    return metadados


def parece_lista_ect(texto: Optional[str]) -> bool:
    """Indica se o texto traz algum marcador típico de lista ECT."""
    if not texto:
        return False
    return any(indicador.search(texto) for indicador in padroes.INDICADORES_LISTA_ECT)
