from __future__ import annotations

import json
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from obrador.constants import CENT
from obrador.documents import Locale
from obrador.llm.client import ChatCompletionClient, LLMError, LLMNotConfiguredError
from obrador.models import format_decimal
from obrador.models.budget import Budget
from obrador.models.client import Client

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

OBSERVATIONS_PROMPTS = {
    Locale.ES: """Analiza estas observaciones de obra y determina si requieren ajuste de precio:

OBSERVACIONES: "{observations}"
PRESUPUESTO BASE: {base_total}€

Responde en JSON con este formato exacto:
{{
  "hasAdjustment": boolean,
  "adjustment": número (porcentaje, positivo o negativo),
  "reason": "texto corto explicando el ajuste"
}}

REGLAS:
- Si menciona dificultades extra, acceso complicado, alturas, refuerzos → suma 5-15%
- Si menciona necesidad de permisos, trámites especiales → suma 8%
- Si menciona materiales especiales caros → suma 10-20%
- Si menciona urgencia/rapidez → suma 10%
- Si menciona simplificación de trabajo → resta 5%
- Si no hay motivo para ajuste → adjustment: 0

Responde SOLO el JSON, sin explicaciones adicionales.""",
    Locale.PT: """Analise estas observações de obra e determine se exigem ajuste de preço:

OBSERVAÇÕES: "{observations}"
ORÇAMENTO BASE: {base_total}€

Responda em JSON com este formato exato:
{{
  "hasAdjustment": boolean,
  "adjustment": número (percentual, positivo ou negativo),
  "reason": "texto curto explicando o ajuste"
}}

REGRAS:
- Se mencionar dificuldades extras, acesso complicado, alturas, reforços → some 5-15%
- Se mencionar necessidade de licenças, trâmites especiais → some 8%
- Se mencionar materiais especiais caros → some 10-20%
- Se mencionar urgência/rapidez → some 10%
- Se mencionar simplificação do trabalho → subtraia 5%
- Se não houver motivo para ajuste → adjustment: 0

Responda SOMENTE o JSON, sem explicações adicionais.""",
}

OBJECTION_PROMPTS = {
    Locale.ES: """Eres un profesional de construcción respondiendo a una objeción de precio.

CONTEXTO REAL:
- Cliente: {client_name}
- Proyecto: {project_name}
- Presupuesto: {total}€
- Distancia: {distance} km
- Objeción del cliente: "{client_message}"

INSTRUCCIONES CRÍTICAS:
1. NO inventes información que no conoces (herramientas, garantías, técnicas)
2. SÉ FACTUAL: solo habla de lo que está en el contexto
3. Usa argumentos genéricos pero reales (calidad, experiencia, responsabilidad)
4. NO uses placeholders como [Tu Nombre] o [Tu Empresa]
5. Termina con "Un cordial saludo" (sin firma)

ESTRUCTURA:
- Saludo empático
- Explica el valor del precio de forma honesta
- Destaca: calidad de trabajo, experiencia, seriedad profesional
- Compara con competencia (sin detalles inventados)
- Ofrece diálogo para ajustar alcance si es necesario
- Cierre profesional

Responde SOLO el texto del email, directo para copiar y pegar.""",
    Locale.PT: """Você é um profissional da construção respondendo a uma objeção de preço.

CONTEXTO REAL:
- Cliente: {client_name}
- Projeto: {project_name}
- Orçamento: {total}€
- Distância: {distance} km
- Objeção do cliente: "{client_message}"

INSTRUÇÕES CRÍTICAS:
1. NÃO invente informações que você não conhece (ferramentas, garantias, técnicas)
2. SEJA FACTUAL: fale apenas do que está no contexto
3. Use argumentos genéricos mas reais (qualidade, experiência, responsabilidade)
4. NÃO use placeholders como [Seu Nome] ou [Sua Empresa]
5. Termine com "Atenciosamente" (sem assinatura)

ESTRUTURA:
- Saudação empática
- Explique o valor do preço de forma honesta
- Destaque: qualidade do trabalho, experiência, seriedade profissional
- Compare com a concorrência (sem detalhes inventados)
- Ofereça diálogo para ajustar o escopo se necessário
- Encerramento profissional

Responda SOMENTE o texto do email, pronto para copiar e colar.""",
}


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_adjustment_reply(reply: str) -> tuple[Decimal, str]:
    """Read ``(percent, reason)`` from the model's JSON reply."""
    data = json.loads(_strip_code_fence(reply))
    if not isinstance(data, dict):
        raise ValueError("Adjustment reply is not a JSON object")
    if not data.get("hasAdjustment"):
        return ZERO, str(data.get("reason") or "")
    try:
        percent = Decimal(str(data.get("adjustment", 0)))
    except InvalidOperation as exc:
        raise ValueError(f"Adjustment is not a number: {data.get('adjustment')!r}") from exc
    if not percent.is_finite():
        raise ValueError("Adjustment is not a finite number")
    return percent, str(data.get("reason") or "")


class AIService:
    def __init__(self, client: ChatCompletionClient, locale: Locale = Locale.ES) -> None:
        self.client = client
        self.locale = Locale(locale)

    @property
    def available(self) -> bool:
        return self.client.configured

    def analyze_observations(
        self,
        observations: str,
        base_total: Decimal,
        locale: Locale | None = None,
    ) -> tuple[Decimal, str]:
        """Suggest a price adjustment from free-text site observations.

        The model answers with a percentage of ``base_total``; the returned
        adjustment is that percentage converted to euros. Any failure
        yields ``(0, "")`` so budget creation can always carry on.
        """
        if not observations.strip():
            return ZERO, ""

        prompt = OBSERVATIONS_PROMPTS[Locale(locale or self.locale)].format(
            observations=observations.strip(),
            base_total=format_decimal(base_total),
        )
        try:
            reply = self.client.complete(prompt, temperature=0.3, max_tokens=200)
            percent, reason = parse_adjustment_reply(reply)
        except LLMNotConfiguredError:
            logger.info("OpenAI API key not set; skipping observation analysis")
            return ZERO, ""
        except LLMError as exc:
            logger.warning("Observation analysis failed: %s", exc)
            return ZERO, ""
        except ValueError as exc:
            logger.warning("Observation analysis returned an unusable reply: %s", exc)
            return ZERO, ""

        if percent == ZERO:
            return ZERO, ""
        adjustment = (base_total * percent / 100).quantize(CENT, rounding=ROUND_HALF_UP)
        logger.info("AI suggested adjustment %s%% (%s) on %s", percent, adjustment, base_total)
        return adjustment, reason

    def draft_objection_response(
        self,
        budget: Budget,
        client: Client,
        client_message: str,
        locale: Locale | None = None,
    ) -> str:
        """Draft a reply to a client's price objection. Raises ``LLMError`` on failure."""
        if not client_message.strip():
            raise ValueError("Client message is required")
        prompt = OBJECTION_PROMPTS[Locale(locale or self.locale)].format(
            client_name=client.name,
            project_name=budget.project_name or "-",
            total=format_decimal(budget.total_price),
            distance=format_decimal(budget.distance_km),
            client_message=client_message.strip(),
        )
        draft = self.client.complete(prompt, temperature=0.6, max_tokens=450)
        logger.info("Drafted objection response for budget %s (%d chars)", budget.number, len(draft))
        return draft
