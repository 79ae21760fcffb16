"""Configuration constants for video_digest.

All constants are re-exported from config.py for convenience.
"""

# General defaults
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Chunking defaults (words per chunk, maximum number of chunks per transcript)
DEFAULT_CHUNK_SIZE = 4000
DEFAULT_MAX_CHUNKS = 5

# Maximum number of chunk summarization calls in flight at once
DEFAULT_CONCURRENCY_LIMIT = 3
MAX_CONCURRENCY_LIMIT = 32

# Sampling temperatures: chunk summaries stay factual, synthesis may restructure
DEFAULT_CHUNK_TEMPERATURE = 0.2
DEFAULT_SYNTHESIS_TEMPERATURE = 0.5
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0

# Timeouts and retries for external calls
DEFAULT_REQUEST_TIMEOUT_SECONDS = 60.0
DEFAULT_METADATA_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_INITIAL_DELAY = 1.0
DEFAULT_RETRY_MAX_DELAY = 30.0

# Generation providers (both speak the OpenAI chat completions protocol)
GENERATION_PROVIDER_GROQ = "groq"
GENERATION_PROVIDER_OPENAI = "openai"
DEFAULT_GENERATION_PROVIDER = GENERATION_PROVIDER_GROQ
GROQ_API_BASE = "https://api.groq.com/openai/v1"

# Model defaults per provider
GROQ_DEFAULT_CHUNK_MODEL = "llama3-70b-8192"
GROQ_DEFAULT_SYNTHESIS_MODEL = "llama-3.3-70b-versatile"
OPENAI_DEFAULT_CHUNK_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_SYNTHESIS_MODEL = "gpt-4o-mini"

# Transcript retrieval
DEFAULT_TRANSCRIPT_LANGUAGES = ("en",)

# YouTube Data API v3
YOUTUBE_VIDEOS_ENDPOINT = "https://www.googleapis.com/youtube/v3/videos"
