# rotafacil/services/ect/modelos.py
"""
Estruturas de dados do extrator de listas ECT.

Um ItemEntrega nasce quando uma linha de código de objeto é reconhecida,
é preenchido pelo extrator de campos, tem o endereço normalizado pela
reconciliação de faixas e é finalizado pelo deduplicador. Coordenadas ou
erro de geocodificação são anexados depois, fora do núcleo.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from rotafacil.utils.helpers import UNKNOWN, validar_cep

MENSAGEM_NAO_RECONHECIDO = "not a recognizable manifest"


@dataclass(frozen=True)
class LinhaBruta:
    texto: str
    indice: int


@dataclass
class ItemEntrega:
    sequence: int = 0
    object_code: Optional[str] = None
    raw_address_line: str = UNKNOWN
    normalized_address: Optional[str] = None
    cep: str = UNKNOWN
    ar_required: bool = False
    destination_hint: Optional[str] = None
    printed_sequence: Optional[int] = None
    source_line: Optional[str] = None
    range_unresolved: bool = False
    coordinates: Optional[Dict[str, float]] = None
    geocoding_error: Optional[str] = None

    @property
    def tem_endereco(self) -> bool:
        return self.raw_address_line != UNKNOWN

    @property
    def tem_cep(self) -> bool:
        return validar_cep(self.cep)

    @property
    def completo(self) -> bool:
        """Item com endereço e CEP conhecidos."""
        return self.tem_endereco and self.tem_cep

    @property
    def precisa_revisao(self) -> bool:
        """Sinaliza extração parcial ou faixa não resolvida para correção manual."""
        return not self.completo or self.range_unresolved

    @property
    def campos_preenchidos(self) -> int:
        return sum([
            self.object_code is not None,
            self.tem_endereco,
            self.tem_cep,
            self.printed_sequence is not None,
            self.destination_hint is not None,
        ])

    @property
    def confianca(self) -> float:
        confianca = 0.3
        if self.printed_sequence is not None:
            confianca += 0.2
        if self.tem_cep:
            confianca += 0.3
        if self.object_code:
            confianca += 0.1
        if self.normalized_address and not self.range_unresolved:
            confianca += 0.2
        if not self.tem_endereco:
            confianca -= 0.3
        return round(min(max(confianca, 0.0), 1.0), 2)

    def to_dict(self) -> Dict[str, Any]:
        dados = asdict(self)
        dados["precisa_revisao"] = self.precisa_revisao
        dados["confianca"] = self.confianca
        return dados

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> "ItemEntrega":
        campos = cls.__dataclass_fields__
        return cls(**{k: v for k, v in dados.items() if k in campos})


@dataclass(frozen=True)
class EnderecoLimpo:
    """Endereço extraído de uma faixa de numeração, já sem os limites da faixa."""
    rua: str
    numero: Optional[str]
    cep: str
    inicio: int = 0
    padrao: str = ""

    @property
    def canonico(self) -> str:
        return f"{self.rua}, {self.numero}" if self.numero else self.rua


@dataclass
class Manifesto:
    items: List[ItemEntrega] = field(default_factory=list)
    list_number: Optional[str] = None
    unit: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    carrier: Optional[str] = None
    date: Optional[str] = None

    @property
    def reconhecido(self) -> bool:
        return bool(self.items)

    @property
    def mensagem(self) -> Optional[str]:
        return None if self.reconhecido else MENSAGEM_NAO_RECONHECIDO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "listNumber": self.list_number,
            "unit": self.unit,
            "district": self.district,
            "city": self.city,
            "state": self.state,
            "carrier": self.carrier,
            "date": self.date,
            "reconhecido": self.reconhecido,
            "mensagem": self.mensagem,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, dados: Dict[str, Any]) -> "Manifesto":
        return cls(
            items=[ItemEntrega.from_dict(i) for i in dados.get("items", [])],
            list_number=dados.get("listNumber"),
            unit=dados.get("unit"),
            district=dados.get("district"),
            city=dados.get("city"),
            state=dados.get("state"),
            carrier=dados.get("carrier"),
            date=dados.get("date"),
        )
