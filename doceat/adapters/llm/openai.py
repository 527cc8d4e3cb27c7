from doceat.core.config import Settings
from doceat.core.errors import GenerationFailure
from doceat.adapters.llm.base import LLM

class OpenAILLM(LLM):
    def __init__(self, settings: Settings):
        self.api_key = settings.OPENAI_API_KEY
        self.model = settings.OPENAI_MODEL

    async def generate(self, prompt: str) -> str:
        from openai import AsyncOpenAI, OpenAIError

        client = AsyncOpenAI(api_key=self.api_key)
        try:
            resp = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You are a helpful assistant."},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.2,
            )
        except OpenAIError as e:
            raise GenerationFailure(f"openai generate failed: {e}") from e
        return resp.choices[0].message.content or ""
