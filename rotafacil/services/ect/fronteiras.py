# rotafacil/services/ect/fronteiras.py
"""
Detecção de início de item e montagem dos itens da lista ECT.

A montagem é uma pequena máquina de estados (SEM_ITEM, ABERTO_INCOMPLETO,
ABERTO_COMPLETO) dobrada sobre as linhas por uma única função de transição.
Um item aberto só é fechado por uma nova fronteira quando já tem endereço;
caso contrário a nova linha de código é incorporada ao mesmo item,
tolerando linhas de código partidas ou duplicadas pelo OCR.
"""
import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from . import padroes
from .campos import campos_da_fronteira, extrair_campos
from .modelos import ItemEntrega, LinhaBruta

logger = logging.getLogger(__name__)


class Estado(Enum):
    SEM_ITEM = "sem_item"
    ABERTO_INCOMPLETO = "aberto_incompleto"
    ABERTO_COMPLETO = "aberto_completo"


@dataclass(frozen=True)
class Fronteira:
    padrao: str
    codigo: Optional[str]
    linha: str
    # texto depois do código; pode trazer endereço ou CEP na mesma linha
    resto: str = ''


@dataclass(frozen=True)
class Acumulador:
    emitidos: Tuple[ItemEntrega, ...] = ()
    aberto: Optional[ItemEntrega] = None

    @property
    def estado(self) -> Estado:
        if self.aberto is None:
            return Estado.SEM_ITEM
        if self.aberto.tem_endereco:
            return Estado.ABERTO_COMPLETO
        return Estado.ABERTO_INCOMPLETO


def normalizar_codigo_objeto(codigo: Optional[str]) -> Optional[str]:
    """'AC973482100br' -> 'AC 973 482 100 BR'. None se não for um código completo."""
    if not codigo:
        return None
    compacto = re.sub(r'\s+', '', codigo).upper()
    if not re.fullmatch(r'[A-Z]{2}\d{9}BR', compacto):
        return None
    return f"{compacto[:2]} {compacto[2:5]} {compacto[5:8]} {compacto[8:11]} BR"


def detectar_fronteira(
    linha: str,
    codigos_transportadora: Sequence[str] = padroes.CODIGOS_TRANSPORTADORA_PADRAO,
    transportadora: Optional[Pattern] = None,
) -> Optional[Fronteira]:
    """Avalia a tabela de padrões em ordem de prioridade."""
    for padrao in padroes.PADROES_FRONTEIRA:
        match = padrao.regex.search(linha)
        if match:
            codigo = match.groupdict().get('codigo')
            return Fronteira(padrao.nome, normalizar_codigo_objeto(codigo), linha, linha[match.end():].strip())
    # "Rodovia MT 130" é endereço, não código de transportadora
    if padroes.PALAVRAS_LOGRADOURO.search(linha):
        return None
    if transportadora is None:
        transportadora = padroes.padrao_transportadora(codigos_transportadora)
    match = transportadora.search(linha)
    if match:
        return Fronteira('transportadora', None, linha, linha[match.end():].strip())
    return None


def _campos_da_linha(item: ItemEntrega, fronteira: Fronteira) -> ItemEntrega:
    item = campos_da_fronteira(item, fronteira.linha)
    if fronteira.resto:
        item = extrair_campos(item, fronteira.resto)
    return item


def _abrir_item(fronteira: Fronteira) -> ItemEntrega:
    item = ItemEntrega(object_code=fronteira.codigo, source_line=fronteira.linha)
    return _campos_da_linha(item, fronteira)


def transicao(acumulador: Acumulador, linha: LinhaBruta, transportadora: Pattern) -> Acumulador:
    fronteira = detectar_fronteira(linha.texto, transportadora=transportadora)
    estado = acumulador.estado

    if fronteira is None:
        if estado is Estado.SEM_ITEM:
            return acumulador
        return replace(acumulador, aberto=extrair_campos(acumulador.aberto, linha.texto))

    if estado is Estado.ABERTO_INCOMPLETO:
        item = acumulador.aberto
        if item.object_code is None and fronteira.codigo:
            item = replace(item, object_code=fronteira.codigo)
        logger.debug(f"🔁 Linha {linha.indice} incorporada ao item aberto (incompleto): {linha.texto}")
        return replace(acumulador, aberto=_campos_da_linha(item, fronteira))

    emitidos = acumulador.emitidos
    if estado is Estado.ABERTO_COMPLETO:
        emitidos = emitidos + (acumulador.aberto,)
    logger.debug(f"✅ Novo objeto ECT ({fronteira.padrao}) na linha {linha.indice}: {linha.texto}")
    return Acumulador(emitidos=emitidos, aberto=_abrir_item(fronteira))


def montar_itens(
    linhas: Iterable[LinhaBruta],
    codigos_transportadora: Sequence[str] = padroes.CODIGOS_TRANSPORTADORA_PADRAO,
) -> List[ItemEntrega]:
    transportadora = padroes.padrao_transportadora(codigos_transportadora)
    final = reduce(
        lambda acc, linha: transicao(acc, linha, transportadora),
        linhas,
        Acumulador(),
    )
    itens = list(final.emitidos)
    if final.aberto is not None:
        if not final.aberto.completo:
            logger.warning(f"⚠️ Último item incompleto mantido para revisão: {final.aberto.source_line}")
        itens.append(final.aberto)
    return [replace(item, sequence=i) for i, item in enumerate(itens, start=1)]
