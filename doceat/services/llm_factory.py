from doceat.core.config import Settings
from doceat.adapters.llm.ollama import OllamaLLM
from doceat.adapters.llm.openai import OpenAILLM

def get_llm(settings: Settings):
    if settings.LLM_PROVIDER == "openai":
        return OpenAILLM(settings)
    return OllamaLLM(settings)
