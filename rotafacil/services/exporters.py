import pandas as pd

from rotafacil.utils.helpers import formatar_cep, validar_cep

# Colunas do CSV exportado, na ordem
COLUNAS_CSV = [
    "sequencia", "sequencia_impressa", "codigo_objeto", "endereco", "cep",
    "latitude", "longitude", "ar", "destino", "status", "linha_original",
]


def _status(item):
    if item.geocoding_error:
        return f"Erro geocodificação: {item.geocoding_error}"
    if item.range_unresolved:
        return "Faixa não resolvida"
    if item.precisa_revisao:
        return "Revisar"
    return "OK"


def manifesto_para_dataframe(manifesto):
    """
    Monta um DataFrame com uma linha por item do manifesto.
    Campos desconhecidos ficam vazios em vez de 'unknown'.
    """
    linhas = []
    for item in manifesto.items:
        coordenadas = item.coordinates or {}
        linhas.append({
            "sequencia": item.sequence,
            "sequencia_impressa": item.printed_sequence,
            "codigo_objeto": item.object_code or "",
            "endereco": item.normalized_address or "",
            "cep": formatar_cep(item.cep) if validar_cep(item.cep) else "",
            "latitude": coordenadas.get("lat"),
            "longitude": coordenadas.get("lng"),
            "ar": "Sim" if item.ar_required else "Não",
            "destino": item.destination_hint or "",
            "status": _status(item),
            "linha_original": item.source_line or "",
        })
    df = pd.DataFrame(linhas, columns=COLUNAS_CSV)
    # Evita "13.0" no CSV quando há sequências impressas ausentes
    df["sequencia_impressa"] = df["sequencia_impressa"].astype("Int64")
    return df


def exportar_csv(manifesto):
    """
    Gera o conteúdo CSV do manifesto.

    Retorna: str (conteúdo do CSV, sem BOM; o BOM é adicionado no download)
    """
    df = manifesto_para_dataframe(manifesto)
    return df.to_csv(index=False)
