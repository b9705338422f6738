# rotafacil/utils/helpers.py
"""
Módulo com funções auxiliares (helpers) utilizadas em toda a aplicação.
Inclui normalização de texto, validação de CEP brasileiro e tabela de UFs.
"""
import unicodedata
import re
from typing import Optional

# Sentinela para campos que o OCR não conseguiu extrair
UNKNOWN = "unknown"

# Nome da UF (sem acentos, minúsculo) -> sigla
UFS_POR_NOME = {
    'acre': 'AC', 'alagoas': 'AL', 'amapa': 'AP', 'amazonas': 'AM', 'bahia': 'BA',
    'ceara': 'CE', 'distrito federal': 'DF', 'espirito santo': 'ES', 'goias': 'GO',
    'maranhao': 'MA', 'mato grosso': 'MT', 'mato grosso do sul': 'MS', 'minas gerais': 'MG',
    'para': 'PA', 'paraiba': 'PB', 'parana': 'PR', 'pernambuco': 'PE', 'piaui': 'PI',
    'rio de janeiro': 'RJ', 'rio grande do norte': 'RN', 'rio grande do sul': 'RS',
    'rondonia': 'RO', 'roraima': 'RR', 'santa catarina': 'SC', 'sao paulo': 'SP',
    'sergipe': 'SE', 'tocantins': 'TO',
}
SIGLAS_UF = frozenset(UFS_POR_NOME.values())


def remover_acentos(texto: str) -> str:
    """Remove diacríticos mantendo a caixa original."""
    if not texto:
        return ''
    return ''.join(
        c for c in unicodedata.normalize('NFKD', str(texto))
        if not unicodedata.combining(c)
    )


def normalizar(texto: str) -> str:
    """
    Remove acentos, pontuação e excesso de espaços para comparação consistente.

    Args:
        texto (str): String de entrada.

    Returns:
        str: String normalizada, minúscula e sem acentos.
    """
    if not texto:
        return ''
    texto = remover_acentos(str(texto).lower())
    # Remove pontuação
    texto = re.sub(r'[^\w\s]', '', texto)
    # Espaços únicos e limpa bordas
    return re.sub(r'\s+', ' ', texto).strip()


def normalizar_cep(cep: str) -> str:
    """
    Converte um CEP em 8 dígitos sem hífen ("38400-650" -> "38400650").
    Devolve UNKNOWN se não houver exatamente 8 dígitos.
    """
    if not cep:
        return UNKNOWN
    digitos = re.sub(r'\D', '', str(cep))
    return digitos if len(digitos) == 8 else UNKNOWN


def validar_cep(cep: str) -> bool:
    """
    Valida um CEP brasileiro já normalizado (8 dígitos ASCII).

    Args:
        cep (str): CEP a validar.

    Returns:
        bool: True se válido, False caso contrário.
    """
    if not isinstance(cep, str):
        return False
    return bool(re.fullmatch(r'[0-9]{8}', cep))


def formatar_cep(cep: str) -> str:
    """Formata 8 dígitos como 'ddddd-ddd' para exibição."""
    if not validar_cep(cep):
        return cep or ''
    return f"{cep[:5]}-{cep[5:]}"


def normalizar_uf(estado: Optional[str]) -> Optional[str]:
    """
    Normaliza o nome ou a sigla de um estado para a sigla da UF.
    'minas gerais', 'Minas Gerais', 'MINAS GERAIS' e 'mg' viram 'MG'.
    """
    if not estado:
        return None
    bruto = re.sub(r'\s+', ' ', str(estado)).strip()
    if len(bruto) == 2:
        sigla = bruto.upper()
        return sigla if sigla in SIGLAS_UF else None
    return UFS_POR_NOME.get(remover_acentos(bruto).lower())


def titulo_cidade(cidade: Optional[str]) -> Optional[str]:
    if not cidade or not str(cidade).strip():
        return None
    return ' '.join(p[:1].upper() + p[1:] for p in str(cidade).lower().split())


def sanitizar_endereco(endereco: str) -> str:
    """
    Limpa uma string de endereço, removendo caracteres perigosos e limitando o tamanho.

    Args:
        endereco (str): Endereço original.

    Returns:
        str: Endereço seguro e sanitizado.
    """
    if not endereco:
        return ""
    endereco = str(endereco)
    # Remove caracteres de controle e outros perigosos para segurança
    endereco = re.sub(r'[<>"\'\\\x00-\x1f\x7f-\x9f]', '', endereco)
    return endereco.strip()[:500]
