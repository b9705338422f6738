# rotafacil/services/ect/faixas.py
"""
Normalização de endereços com faixa de numeração.

Os Correios imprimem, para ruas longas, a faixa de números atendida pelo CEP
seguida do número da entrega:

    Rua Rio Grande do Sul - de 240/241 a 1533/1534, 956 CEP: 38400650

Só o número avulso (956) interessa. A extração roda sobre o texto inteiro,
porque a faixa costuma ser quebrada em mais de uma linha pelo OCR, e o
resultado é depois reassociado aos itens por três estratégias, nesta ordem:

1. posição: o i-ésimo item com faixa recebe o i-ésimo endereço limpo,
   apenas quando as duas listas têm o mesmo tamanho;
2. CEP: itens que ainda mostram faixa recebem o endereço limpo de mesmo CEP;
3. manual: regex direta sobre a linha bruta do próprio item.

A posição vem antes do CEP. Um casamento posicional errado que não deixe
marcas de faixa nunca é revisto pela estratégia 2; esse comportamento é
mantido de propósito, pois não há referência que diga qual das duas deve
prevalecer.

O CEP do item nunca é alterado aqui: o CEP capturado pela faixa é descartado
em favor do CEP lido pelo extrator de campos.
"""
import logging
import re
from dataclasses import replace
from typing import List, Optional, Sequence, Set

from rotafacil.utils.helpers import normalizar_cep
from . import padroes
from .campos import remover_rotulo_endereco
from .modelos import EnderecoLimpo, ItemEntrega

logger = logging.getLogger(__name__)


def _limpar_rua(bruta: str) -> str:
    linhas = [l.strip() for l in bruta.splitlines() if l.strip()]
    # A captura pode atravessar linhas; começa na última que abre com logradouro
    for i in range(len(linhas) - 1, -1, -1):
        if padroes.PALAVRAS_LOGRADOURO.match(linhas[i]):
            linhas = linhas[i:]
            break
    rua = padroes.ROTULO_ENDERECO.sub('', ' '.join(linhas))
    return re.sub(r'\s+', ' ', rua).strip(' .,-')


def _inicio_plausivel(texto: str, inicio: int, rua_bruta: str) -> bool:
    """
    Rejeita capturas que começam no meio de um nome de rua com algarismos
    ("Rua 7 de Setembro" capturaria só "de Setembro").
    """
    prefixo = texto[texto.rfind('\n', 0, inicio) + 1:inicio].strip()
    if not prefixo or prefixo.endswith(':'):
        return True
    return bool(padroes.PALAVRAS_LOGRADOURO.match(rua_bruta.strip()))


def extrair_enderecos_limpos(texto: Optional[str]) -> List[EnderecoLimpo]:
    """Aplica os cinco padrões de faixa ao texto inteiro e devolve os endereços em ordem de aparição."""
    if not texto:
        return []

    candidatos = []
    for ordem, padrao in enumerate(padroes.PADROES_FAIXA):
        for match in padrao.regex.finditer(texto):
            candidatos.append((match.start(), ordem, match, padrao.nome))
    candidatos.sort(key=lambda c: (c[0], c[1]))

    limpos: List[EnderecoLimpo] = []
    ocupados = []
    for inicio, _, match, nome in candidatos:
        fim = match.end()
        if any(inicio < f and fim > i for i, f in ocupados):
            continue
        if not _inicio_plausivel(texto, inicio, match.group('rua')):
            logger.debug(f"⏭️ Captura de faixa descartada ({nome}): {match.group(0)!r}")
            continue
        rua = _limpar_rua(match.group('rua'))
        if not rua:
            continue
        ocupados.append((inicio, fim))
        limpo = EnderecoLimpo(
            rua=rua,
            numero=match.group('numero'),
            cep=normalizar_cep(match.group('cep')),
            inicio=inicio,
            padrao=nome,
        )
        limpos.append(limpo)
        logger.debug(f"🎯 Endereço limpo extraído ({nome}): {limpo.canonico} (CEP: {limpo.cep})")

    logger.info(f"✅ Total de endereços limpos extraídos: {len(limpos)}")
    return limpos


def faixa_com_barra(texto: Optional[str]) -> bool:
    """Verdadeiro se o texto ainda mostra ' a ' ou ' até ' junto de um par N/N."""
    if not texto:
        return False
    minusculo = f" {texto.lower()} "
    return (' a ' in minusculo or ' até ' in minusculo) and bool(padroes.PAR_BARRA.search(texto))


def tem_faixa(texto: Optional[str]) -> bool:
    if not texto:
        return False
    return (
        bool(padroes.FAIXA_NUMERACAO.search(texto))
        or faixa_com_barra(texto)
        or bool(padroes.FAIXA_ABERTA.search(texto.strip()))
    )


def endereco_base(item: ItemEntrega) -> Optional[str]:
    """Endereço bruto sem rótulo, sem o fragmento 'CEP: ...' e com espaços únicos."""
    if not item.tem_endereco:
        return None
    texto = remover_rotulo_endereco(item.raw_address_line)
    texto = padroes.FRAGMENTO_CEP.sub('', texto)
    return re.sub(r'\s+', ' ', texto).strip(' ,;-') or None


def _limpeza_manual(item: ItemEntrega) -> Optional[str]:
    linha = remover_rotulo_endereco(item.raw_address_line)
    for padrao in padroes.PADROES_FAIXA_MANUAL:
        match = padrao.regex.match(linha)
        if match:
            rua = re.sub(r'\s+', ' ', match.group('rua')).strip(' .,-')
            return f"{rua}, {match.group('numero')}"
    return None


def reconciliar(itens: Sequence[ItemEntrega], limpos: Sequence[EnderecoLimpo]) -> List[ItemEntrega]:
    """
    Associa os endereços limpos aos itens. Não altera as entradas; devolve cópias
    com normalized_address preenchido e range_unresolved sinalizado.
    """
    resultado = [
        replace(item, normalized_address=endereco_base(item), range_unresolved=False)
        for item in itens
    ]
    pendentes = [i for i, item in enumerate(resultado) if tem_faixa(item.normalized_address)]
    resolvidos: Set[int] = set()
    usados: Set[int] = set()

    # Estratégia 1: correspondência por índice
    if pendentes and len(pendentes) == len(limpos):
        for j, (i, limpo) in enumerate(zip(pendentes, limpos)):
            item = resultado[i]
            if item.tem_cep and limpo.cep != item.cep:
                logger.warning(
                    f"⚠️ Item {item.sequence}: associação por posição com CEP divergente "
                    f"({limpo.cep} != {item.cep}); CEP do item mantido."
                )
            resultado[i] = replace(item, normalized_address=limpo.canonico)
            resolvidos.add(i)
            usados.add(j)
            logger.debug(f"🧹 Item {item.sequence} limpo (índice): {limpo.canonico} (CEP {item.cep} mantido)")
    elif pendentes:
        logger.info(
            f"ℹ️ {len(pendentes)} itens com faixa e {len(limpos)} endereços limpos: "
            "associação por índice ignorada."
        )

    # Estratégia 2: correspondência por CEP
    for i in pendentes:
        item = resultado[i]
        if i in resolvidos or not item.tem_cep:
            continue
        candidatos = [j for j, limpo in enumerate(limpos) if limpo.cep == item.cep]
        if not candidatos:
            continue
        j = next((j for j in candidatos if j not in usados), candidatos[0])
        resultado[i] = replace(item, normalized_address=limpos[j].canonico)
        resolvidos.add(i)
        usados.add(j)
        logger.debug(f"🧹 Item {item.sequence} limpo (CEP): {limpos[j].canonico}")

    # Estratégia 3: regex direta na linha do item
    for i in pendentes:
        if i in resolvidos:
            continue
        item = resultado[i]
        manual = _limpeza_manual(item)
        if manual:
            resultado[i] = replace(item, normalized_address=manual)
            logger.debug(f"🔧 Item {item.sequence} limpo manualmente: {manual}")
        else:
            resultado[i] = replace(item, range_unresolved=True)
            logger.warning(f"⚠️ Item {item.sequence} mantém faixa de numeração: {item.normalized_address}")

    return resultado


def normalizar_faixas(texto: Optional[str], itens: Sequence[ItemEntrega]) -> List[ItemEntrega]:
    return reconciliar(itens, extrair_enderecos_limpos(texto))
