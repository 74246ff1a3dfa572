import logging

import httpx

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """General chat completion failure."""


class LLMNotConfiguredError(LLMError):
    """Raised when no API key is configured."""


class ChatCompletionClient:
    """Minimal client for an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def complete(self, prompt: str, temperature: float = 0.7, max_tokens: int = 400) -> str:
        if not self.api_key:
            raise LLMNotConfiguredError("OpenAI API key not configured")

        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        try:
            resp = self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Chat completion request failed: %s", exc)
            raise LLMError("Chat completion service unreachable") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            logger.error("Chat completion returned invalid JSON: %s", exc)
            raise LLMError("Invalid response from chat completion service") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMError("Chat completion response has no message content") from exc
        if not content or not content.strip():
            raise LLMError("Chat completion returned an empty message")
        logger.debug("Chat completion used model %s", data.get("model", self.model))
        return content.strip()


def get_chat_client() -> ChatCompletionClient:
    from obrador.settings import settings

    return ChatCompletionClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout,
    )
