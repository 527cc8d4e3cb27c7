from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "DocEat"
    ENV: str = "local"

    # staging area for uploaded files
    UPLOAD_PATH: str = "./uploads"

    # server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3000
    # Comma-separated list of allowed origins, "*" for any.
    CORS_ORIGINS: str = "*"

    # chunking
    CHUNK_SIZE: int = 150
    CHUNK_OVERLAP: int = 25
    MAX_JSON_DEPTH: int = 64

    # vector db
    VECTOR_DB_URL: str = "http://localhost:6333"
    VECTOR_DB_API_KEY: str | None = None
    VECTOR_DB_TIMEOUT: int = 20

    # embedding
    # Backends:
    # - ollama: uses Ollama /api/embed (local-first, no heavy python deps)
    # - openai: uses OpenAI embeddings
    # - st: uses sentence-transformers (requires optional deps: pip install .[local_ml])
    EMBED_BACKEND: str = "ollama"  # ollama|openai|st
    EMBED_MODEL: str = "BAAI/bge-m3"  # used for st
    OLLAMA_EMBED_MODEL: str = "nomic-embed-text"
    OPENAI_EMBED_MODEL: str = "text-embedding-3-small"
    EMBED_DIM: int = 768  # only shapes collections of empty documents
    EMBED_BATCH: int = 32
    EMBED_CONCURRENCY: int = 4

    # llm
    LLM_PROVIDER: str = "ollama"  # ollama|openai
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "llama3.1"
    OLLAMA_NUM_PREDICT: int = 512
    OLLAMA_TEMPERATURE: float = 0.2
    OLLAMA_TOP_P: float = 0.9
    OLLAMA_KEEP_ALIVE: str = "30m"
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    # retrieval
    QUERY_LIMIT: int = 5

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
