# rotafacil/services/ect/padroes.py
"""
Tabelas de expressões regulares usadas pelo extrator de listas ECT.

As tabelas são ordenadas: a primeira entrada que casar vence. Cada entrada
tem um nome para que a precedência possa ser testada isoladamente.
"""
import re
from typing import NamedTuple, Pattern, Tuple

# Pares de letras vistos em listas reais quando o OCR destrói o resto do código.
# Pode ser sobrescrito por ECT_CODIGOS_TRANSPORTADORA (config).
CODIGOS_TRANSPORTADORA_PADRAO: Tuple[str, ...] = ("MI", "OY", "MJ", "MT", "TJ")

CODIGO_OBJETO = r'[A-Z]{2}\s*\d{3}\s*\d{3}\s*\d{3}\s*BR'
SUFIXO_ORDEM = r'\d{1,2}-\d{0,3}'


class PadraoFronteira(NamedTuple):
    nome: str
    regex: Pattern


PADROES_FRONTEIRA: Tuple[PadraoFronteira, ...] = (
    # "013 AC 973 482 100 BR 13-"
    PadraoFronteira('canonico', re.compile(
        rf'^(?P<seq>\d{{3}})\s+(?P<codigo>{CODIGO_OBJETO})(?![A-Za-z]).*?(?P<ordem>(?<!\d){SUFIXO_ORDEM})'
    )),
    # "Item 014 - 015 AC 973 768 535 BR • 14-" ou sequência ilegível
    PadraoFronteira('sem_sequencia', re.compile(
        rf'(?<![A-Za-z])(?P<codigo>{CODIGO_OBJETO})(?![A-Za-z])'
    )),
    # OCR degradado: "AC 973 482 1O0" ou só o par de letras seguido de dígitos
    PadraoFronteira('permissivo', re.compile(
        r'(?<![A-Za-z])[A-Z]{1,2}\s+\d{3}\s+\d{3}\s+\d{3}'
    )),
)


def padrao_transportadora(codigos) -> Pattern:
    """Monta o padrão permissivo a partir da tabela de pares de letras."""
    alternativas = '|'.join(re.escape(c.strip().upper()) for c in codigos if c and c.strip())
    if not alternativas:
        return re.compile(r'(?!)')
    return re.compile(rf'(?<![A-Za-z])(?:{alternativas})(?![A-Za-z])\s*\d{{3}}')


SEQUENCIA_IMPRESSA = re.compile(r'^(?:item\s*)?(\d{3})(?!\d)', re.IGNORECASE)

AR_OBRIGATORIO = re.compile(
    rf'(?:(?<![A-Za-z])X\s*{SUFIXO_ORDEM}|{SUFIXO_ORDEM}\s*X(?![A-Za-z])|\bAR\s*:?\s*X(?![A-Za-z]))'
)

# Campos de item
PALAVRAS_LOGRADOURO = re.compile(
    r'(?<!\w)(?:rua|r\.|avenida|av\.?|alameda|al\.|travessa|trav\.|tv\.|pra[çc]a|p[çc]\.|'
    r'estrada|estr?\.|rodovia|rod\.)(?!\w)',
    re.IGNORECASE,
)
ROTULO_ENDERECO = re.compile(r'^endere[çc]o\s*:?\s*', re.IGNORECASE)
ROTULOS_NAO_ENDERECO = re.compile(
    r'^(?:coordenadas|destinat[aá]rio|hora|doc\.?\s*identidade|nome\s+leg[ií]vel|cep|'
    r'item\s+objeto|continua\s+na)\b',
    re.IGNORECASE,
)
CEP = re.compile(r'(?<!\d)(\d{5})-?(\d{3})(?!\d)')
FRAGMENTO_CEP = re.compile(r'\bCEP\s*:?\s*\d{5}-?\d{3}', re.IGNORECASE)

# Faixas de numeração
RUA = r"(?P<rua>[A-Za-zÀ-ÿ][A-Za-zÀ-ÿ\s.']*?)"
NUMERO = r'(?:\s*,\s*(?P<numero>\d+))?'
CEP_FAIXA = r'\s*CEP\s*:?\s*(?P<cep>\d{5}-?\d{3})(?!\d)'
ATE = r'at[ée]'


class PadraoFaixa(NamedTuple):
    nome: str
    regex: Pattern


PADROES_FAIXA: Tuple[PadraoFaixa, ...] = (
    # "Rua Rio Grande do Sul - de 240/241 a 1533/1534, 956 CEP: 38400650"
    PadraoFaixa('hifen_de_a', re.compile(
        rf'{RUA}\s*-\s*de\s+[\d/\s]+?a\s+[\d/\s]+?{NUMERO}{CEP_FAIXA}', re.IGNORECASE
    )),
    # "Rua das Flores de 100 a 200, 150 CEP: 38400100"
    PadraoFaixa('de_a', re.compile(
        rf'{RUA}\s+de\s+[\d\s]+?a\s+[\d\s]+?{NUMERO}{CEP_FAIXA}', re.IGNORECASE
    )),
    # "Avenida Amazonas - até 1469/1470, 232 CEP: 38400734"
    PadraoFaixa('hifen_ate', re.compile(
        rf'{RUA}\s*-\s*{ATE}\s+[\d/\s]+?{NUMERO}{CEP_FAIXA}', re.IGNORECASE
    )),
    # "Avenida Brasil até 500/600, 550 CEP: 38400200"
    PadraoFaixa('ate', re.compile(
        rf'{RUA}\s+{ATE}\s+[\d/\s]+?{NUMERO}{CEP_FAIXA}', re.IGNORECASE
    )),
    # "Avenida Floriano Peixoto - de 3070/3071 até 4242/4243, 3283 CEP: 38400704"
    PadraoFaixa('hifen_de_ate', re.compile(
        rf'{RUA}\s*-\s*de\s+[\d/\s]+?{ATE}\s+[\d/\s]+?{NUMERO}{CEP_FAIXA}', re.IGNORECASE
    )),
)

# Último recurso, aplicado à linha bruta do próprio item
PADROES_FAIXA_MANUAL: Tuple[PadraoFaixa, ...] = (
    PadraoFaixa('manual_de', re.compile(
        rf'^(?P<rua>[^-]+)-\s*de\s+[\d/\s]+(?:a|{ATE})\s+[\d/\s]+,\s*(?P<numero>\d+){CEP_FAIXA}',
        re.IGNORECASE,
    )),
    PadraoFaixa('manual_ate', re.compile(
        rf'^(?P<rua>[^-]+)-\s*{ATE}\s+[\d/\s]+,\s*(?P<numero>\d+){CEP_FAIXA}',
        re.IGNORECASE,
    )),
)

FAIXA_NUMERACAO = re.compile(
    rf'(?:(?<!\w)de\s+\d[\d/\s]*(?:a|{ATE})\s+\d|(?<!\w){ATE}\s+\d+\s*/\s*\d+)',
    re.IGNORECASE,
)
PAR_BARRA = re.compile(r'\d+\s*/\s*\d+')
# Faixa cortada pela quebra de linha do OCR: "Rua X - de 240/241" ou "Avenida Y - até"
FAIXA_ABERTA = re.compile(rf'-\s*(?:de|{ATE})(?:\s+[\d/\s]*)?$', re.IGNORECASE)


# Cabeçalho do manifesto
LISTA = re.compile(r'Lista\s*:\s*(\w+)', re.IGNORECASE)
UNIDADE = re.compile(r'Unidade\s*:\s*(\d+)\s*-\s*([^-\n]+)', re.IGNORECASE)
DISTRITO = re.compile(r'Distrito\s*:\s*(\d+)', re.IGNORECASE)
UF_PAIS = re.compile(r'\b([A-Z]{2})/([A-Z]{2})\b')
CIDADE_UF = re.compile(r"([A-Za-zÀ-ÿ][A-Za-zÀ-ÿ .']*?)\s*-\s*([A-Z]{2})/([A-Z]{2})\b")
CARTEIRO = re.compile(r'Carteiro\s*:\s*(\d+)', re.IGNORECASE)
DATA = re.compile(r'(\d{2}/\d{2}/\d{4})')
INDICADORES_LISTA_ECT = (
    re.compile(r'ECT\s+LISTA\s+DE\s+OBJETOS\s+ENTREGUES', re.IGNORECASE),
    re.compile(r'Lista\s*:\s*OEC\s*\d+', re.IGNORECASE),
    re.compile(r'Unidade\s*:\s*\d+\s*-\s*CDD', re.IGNORECASE),
    re.compile(r'Carteiro\s*:\s*\d+', re.IGNORECASE),
    re.compile(r'Endere[çc]o:\s*[^\n]+', re.IGNORECASE),
)
