"""
Unified configuration and settings
Provider credentials, batching/retry policy and report thresholds
"""

from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()

FIXTURES_DIR = Path(__file__).resolve().parent.parent / "domain" / "evaluation" / "fixtures"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Values can be set via:
    1. Environment variables (highest priority)
    2. .env file (loaded by load_dotenv())
    3. Default values below (lowest priority)
    
    A provider only takes part in a benchmark run when its API key is set.
    """
    
    log_level: str = "INFO"
    
    # ------------------------
    # Embedding: OpenAI
    # ------------------------

    openai_api_key: str = ""
    openai_api_url: str = "https://api.openai.com/v1/embeddings"
    openai_model: str = "text-embedding-3-small"
    
    # ------------------------
    # Embedding: Voyage AI
    # ------------------------

    voyage_api_key: str = ""
    voyage_api_url: str = "https://api.voyageai.com/v1/embeddings"
    voyage_model: str = "voyage-3.5"
    
    # ------------------------
    # Embedding: Jina Embedding API
    # ------------------------

    jina_api_key: str = ""
    jina_api_url: str = "https://api.jina.ai/v1/embeddings"
    jina_model: str = "jina-embeddings-v4"
    
    # ------------------------
    # Batching & retry
    # ------------------------

    embedding_timeout: int = 60  # seconds per HTTP request
    embedding_batch_size: int = 10
    retry_max_retries: int = 5
    retry_initial_delay: float = 25.0  # seconds; providers with per-minute quotas
    retry_growth_factor: float = 1.5
    provider_run_timeout: Optional[float] = None  # seconds for a whole provider run
    
    # ------------------------
    # Fixtures
    # ------------------------

    corpus_path: Path = FIXTURES_DIR / "corpus.json"
    queries_path: Path = FIXTURES_DIR / "queries.json"
    
    # ------------------------
    # Report
    # ------------------------

    report_top_k: int = 5
    report_rr_delta_threshold: float = 0.3
    report_draw_threshold: float = 0.03  # relative MRR difference
    
    class Config:
        """
        Pydantic configuration for settings loading.
        
        - env_file: Which .env file to read
        - env_file_encoding: File encoding
        - extra: What to do with extra fields in .env that aren't in this class
        """
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra .env vars


# Singleton settings instance
settings = Settings()
