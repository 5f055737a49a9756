"""Configuration management and environment variable loading."""

import os
from dotenv import load_dotenv

# Load environment variables from .env file (don't override existing env vars)
load_dotenv(override=False)

FAL_KEY_PLACEHOLDER = "your_fal_api_key_here"


class Config:
    """Application configuration."""
    
    # Simple class attributes - read from environment
    # On Streamlit Cloud, secrets are copied in once before anything runs
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    NOTES_MODEL: str = os.getenv("NOTES_MODEL", "gpt-4o-mini")
    IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "gpt-image-1")
    
    # Fast image provider (fal.ai) - optional, skipped when unset
    FAL_API_KEY: str = os.getenv("FAL_API_KEY", "")
    
    # Transcript sources
    SUPADATA_API_KEY: str = os.getenv("SUPADATA_API_KEY", "")
    PROXY_BASE_URL: str = os.getenv("PROXY_BASE_URL", "http://localhost:3001").rstrip("/")
    # Set to an empty string to drop the tertiary strategy
    ALT_TRANSCRIPT_API_URL: str = os.getenv(
        "ALT_TRANSCRIPT_API_URL", "https://api.youtubetranscript.com/v1/transcript"
    )
    
    PORT: int = int(os.getenv("PORT", "3001"))
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "60"))
    
    # YouTube cookies for the proxy's caption extractor (optional)
    # Set to path of cookies.txt file exported from browser
    YOUTUBE_COOKIES_TXT: str = os.getenv("YOUTUBE_COOKIES_TXT", "")
    
    @classmethod
    def validate(cls) -> None:
        """Validate that required configuration is present."""
        if not cls.OPENAI_API_KEY:
            raise ValueError(
                "OPENAI_API_KEY is required. Please set it in your .env file or environment variables."
            )
    
    @classmethod
    def has_fal_key(cls) -> bool:
        """True when a real fal.ai key is configured."""
        return bool(cls.FAL_API_KEY) and cls.FAL_API_KEY != FAL_KEY_PLACEHOLDER
