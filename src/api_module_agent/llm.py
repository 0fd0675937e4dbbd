"""Dispatch of assembled task prompts to a language model through litellm."""

import os

from litellm import completion

from api_module_agent.errors import LlmReplyError
from api_module_agent.logging import get_logger
from api_module_agent.tokens import estimate_tokens

DEFAULT_MODEL = "claude-sonnet-4-20250514"

MODEL_ENV = "API_MODULES_MODEL"

SYSTEM_PROMPT = (
    "Eres un asistente de desarrollo. Implementa la tarea solicitada usando únicamente "
    "los endpoints de la API listados en el contexto. Si falta un endpoint, dilo explícitamente."
)

logger = get_logger("llm")


class LlmClient:
    """Sends a task prompt to the model chosen by argument, $API_MODULES_MODEL or the default."""

    def __init__(self, model: str | None = None, system_prompt: str = SYSTEM_PROMPT):
        self.model = model or os.getenv(MODEL_ENV) or DEFAULT_MODEL
        self.system_prompt = system_prompt

    def send_prompt(self, prompt: str) -> str:
        """Return the model's reply to one assembled prompt."""
        logger.info("Sending prompt (~%d tokens) to %s", estimate_tokens(prompt), self.model)
        response = completion(model=self.model, messages=self.messages_for(prompt))
        reply = response.choices[0].message.content
        if not reply:
            raise LlmReplyError(f"Model {self.model} returned an empty reply")
        return reply

    def messages_for(self, prompt: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": prompt},
        ]
