# rotafacil/utils/ocr.py
"""
Extração de texto de fotos de listas ECT via OCR externo.

Cascata: OCR.space (chave gratuita 'helloworld' se nenhuma for configurada)
e, em seguida, Google Cloud Vision quando GOOGLE_CLOUD_VISION_API_KEY existir.
Nenhum OCR local é executado.
"""
import base64
import logging
import os

import requests

logger = logging.getLogger(__name__)

OCR_SPACE_URL = "https://api.ocr.space/parse/image"
VISION_URL = "https://vision.googleapis.com/v1/images:annotate"


def ocr_space(conteudo: bytes, mimetype: str = "image/jpeg") -> dict:
    extensao = (mimetype or "image/jpeg").split('/')[-1]
    try:
        r = requests.post(
            OCR_SPACE_URL,
            files={"file": (f"lista.{extensao}", conteudo, mimetype)},
            data={"language": "por", "isOverlayRequired": "false"},
            headers={"apikey": os.environ.get("OCR_SPACE_API_KEY") or "helloworld"},
            timeout=30,
        )
        r.raise_for_status()
        data = r.json()
    except requests.Timeout:
        return {"status": "TIMEOUT", "texto": ""}
    except requests.RequestException as e:
        return {"status": f"ERRO: {e}", "texto": ""}

    if data.get("IsErroredOnProcessing"):
        return {"status": f"ERRO: {data.get('ErrorMessage')}", "texto": ""}

    resultados = data.get("ParsedResults") or [{}]
    texto = resultados[0].get("ParsedText", "")
    if not texto.strip():
        return {"status": "SEM_TEXTO", "texto": ""}
    # OCR.space não informa confiança
    return {"status": "OK", "texto": texto, "confianca": 0.7, "provedor": "ocr.space"}


def google_vision(conteudo: bytes, mimetype: str = "image/jpeg") -> dict:
    api_key = os.environ.get("GOOGLE_CLOUD_VISION_API_KEY")
    if not api_key:
        return {"status": "SEM_CHAVE", "texto": ""}

    corpo = {
        "requests": [{
            "image": {"content": base64.b64encode(conteudo).decode("ascii")},
            "features": [{"type": "TEXT_DETECTION", "maxResults": 1}],
        }]
    }
    try:
        r = requests.post(VISION_URL, params={"key": api_key}, json=corpo, timeout=30)
        r.raise_for_status()
        data = r.json()
    except requests.Timeout:
        return {"status": "TIMEOUT", "texto": ""}
    except requests.RequestException as e:
        return {"status": f"ERRO: {e}", "texto": ""}

    respostas = data.get("responses") or [{}]
    anotacoes = respostas[0].get("textAnnotations") or []
    texto = anotacoes[0].get("description", "") if anotacoes else ""
    if not texto.strip():
        return {"status": "SEM_TEXTO", "texto": ""}
    return {"status": "OK", "texto": texto, "confianca": 0.9, "provedor": "google-cloud-vision"}


OCR_PRIORITY = [ocr_space, google_vision]


def extrair_texto(conteudo: bytes, mimetype: str = "image/jpeg") -> dict:
    """
    Retorna {"status", "texto", "confianca", "provedor"} do primeiro provedor
    que devolver texto, ou ALL_PROVIDERS_FAILED com os erros de cada um.
    """
    if not conteudo:
        return {"status": "SEM_IMAGEM", "texto": "", "confianca": 0.0, "provedor": None}

    erros = []
    for ocr_func in OCR_PRIORITY:
        provider_name = ocr_func.__name__
        logger.info(f"🔍 Tentando OCR com o provedor: {provider_name}...")
        try:
            resultado = ocr_func(conteudo, mimetype) or {}
            if resultado.get("status") == "OK":
                logger.info(f"✅ OCR concluído via {provider_name}: {len(resultado['texto'])} caracteres")
                return resultado
            logger.warning(f"Provedor de OCR {provider_name} falhou (Status: {resultado.get('status')}).")
            erros.append({provider_name: resultado.get("status")})
        except Exception as e:
            logger.error(f"Erro inesperado no OCR {provider_name}: {e}", exc_info=True)
            erros.append({provider_name: str(e)})

    logger.error("❌ Todos os provedores de OCR falharam.")
    return {"status": "ALL_PROVIDERS_FAILED", "texto": "", "confianca": 0.0, "provedor": None, "erros": erros}
