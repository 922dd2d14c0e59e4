"""Extração do public_id do Cloudinary a partir da URL da imagem."""

from typing import Any, Optional
from urllib.parse import unquote, urlsplit

UPLOAD_SEGMENT = "upload"


def extract_public_id(url: Any) -> Optional[str]:
    """
    Retorna o public_id de uma URL de entrega do Cloudinary, ou None se não der.

    Ex.: 'https://res.cloudinary.com/demo/image/upload/v1712/sundorica/camisa.jpg'
    -> 'sundorica/camisa'. O segmento logo após 'upload' (versão) é descartado;
    pastas aninhadas são mantidas e a extensão do último segmento é removida.
    """
    if not isinstance(url, str) or not url:
        return None

    # A URL de entrega codifica acentos (%C3%A7); a Search API devolve o public_id decodificado.
    parts = unquote(urlsplit(url).path).split("/")
    if UPLOAD_SEGMENT not in parts:
        return None

    remaining = parts[parts.index(UPLOAD_SEGMENT) + 2:]
    if not remaining or not remaining[-1]:
        return None

    last = remaining[-1]
    if "." in last:
        remaining[-1] = last[: last.rindex(".")]
    public_id = "/".join(remaining)
    return public_id or None
