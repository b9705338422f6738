# rotafacil/services/ect/pipeline.py
"""
Pipeline completo: texto do OCR -> Manifesto.

Função pura e determinística; nunca levanta exceção por texto malformado.
Texto sem nenhuma linha de código de objeto resulta num manifesto vazio
com a mensagem de lista não reconhecida.
"""
import logging
from typing import Optional, Sequence

from . import padroes
from .cabecalho import extrair_metadados, parece_lista_ect
from .deduplicador import deduplicar
from .faixas import normalizar_faixas
from .fronteiras import montar_itens
from .modelos import Manifesto
from .segmentador import segmentar_linhas

logger = logging.getLogger(__name__)


def extrair_manifesto(texto: Optional[str], codigos_transportadora: Optional[Sequence[str]] = None) -> Manifesto:
    if codigos_transportadora is None:
        codigos_transportadora = padroes.CODIGOS_TRANSPORTADORA_PADRAO

    linhas = segmentar_linhas(texto)
    logger.info(f"📄 Processando lista ECT com {len(linhas)} linhas")

    itens = montar_itens(linhas, codigos_transportadora)
    itens = normalizar_faixas(texto, itens)
    itens = deduplicar(itens)

    manifesto = Manifesto(items=itens, **extrair_metadados(texto))

    if not manifesto.reconhecido:
        if parece_lista_ect(texto):
            logger.warning("⚠️ Texto tem cabeçalho de lista ECT, mas nenhum objeto foi reconhecido.")
        else:
            logger.info("ℹ️ Nenhum objeto ECT encontrado no texto.")
        return manifesto

    revisao = sum(1 for item in itens if item.precisa_revisao)
    logger.info(f"✅ Lista ECT processada: {len(itens)} itens ({revisao} para revisão)")
    return manifesto
