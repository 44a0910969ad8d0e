"""
Configuration settings for the site capacity optimizer.
Load configuration from environment variables or a .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


class Settings:
    """Application settings loaded from environment variables."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    DATA_DIR = Path(os.getenv('DATA_DIR', str(PROJECT_ROOT / 'data')))
    OUTPUT_DATA_DIR = Path(os.getenv('OUTPUT_DATA_DIR', str(DATA_DIR / 'output')))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = Path(os.getenv('LOG_DIR', str(PROJECT_ROOT / 'logs')))
    LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'false').lower() in ('1', 'true', 'yes')

    # ============================================================================
    # Optimizer
    # ============================================================================
    MAX_LEVELING_ITERATIONS = int(os.getenv('MAX_LEVELING_ITERATIONS', '200'))

    @classmethod
    def validate_required_settings(cls) -> list[str]:
        """
        Validate that settings hold usable values.
        Returns list of problems found.
        """
        problems = []

        if cls.MAX_LEVELING_ITERATIONS < 0:
            problems.append('MAX_LEVELING_ITERATIONS must be >= 0')

        return problems


# Create settings instance
settings = Settings()
