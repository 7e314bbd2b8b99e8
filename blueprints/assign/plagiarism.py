from __future__ import annotations
import logging
from typing import Callable

from flask import Flask, current_app

log = logging.getLogger(__name__)

PlagiarismProvider = Callable[[dict], str]

def register_provider(app: Flask, provider: PlagiarismProvider) -> None:
    app.extensions.setdefault("plagiarism_providers", []).append(provider)

def get_links(params: dict) -> str:
    """HTML-ссылки всех провайдеров антиплагиата для ответа; пусто, если проверка выключена."""
    if not current_app.config.get("ENABLE_PLAGIARISM"):
        return ""
    providers = current_app.extensions.get("plagiarism_providers", [])
    out = []
    for provider in providers:
        html = provider(params)
        if html:
            out.append(html)
    log.debug("plagiarism links: %d provider(s) answered", len(out))
    return "".join(out)
