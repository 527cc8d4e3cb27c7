import httpx

from doceat.core.config import Settings
from doceat.core.errors import GenerationFailure
from doceat.adapters.llm.base import LLM

class OllamaLLM(LLM):
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = settings.OLLAMA_BASE_URL.rstrip("/")
        self.model = settings.OLLAMA_MODEL
        self.keep_alive = settings.OLLAMA_KEEP_ALIVE
        self.options = {
            "num_predict": settings.OLLAMA_NUM_PREDICT,
            "temperature": settings.OLLAMA_TEMPERATURE,
            "top_p": settings.OLLAMA_TOP_P,
        }
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        try:
            async with httpx.AsyncClient(timeout=180, transport=self._transport) as client:
                r = await client.post(
                    f"{self.base_url}/api/generate",
                    json={
                        "model": self.model,
                        "prompt": prompt,
                        "stream": False,
                        "keep_alive": self.keep_alive,
                        "options": self.options,
                    },
                )
                r.raise_for_status()
                return r.json().get("response", "")
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationFailure(f"ollama generate failed: {e}") from e
