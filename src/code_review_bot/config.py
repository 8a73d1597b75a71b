"""
Configuration Management

Settings for the analysis service, git defaults, report paths and logging.
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
import logging


@dataclass
class LLMConfig:
    """Analysis service settings"""
    api_key: Optional[str] = None
    model: str = "gpt-4-0125-preview"
    base_url: str = "https://api.openai.com/v1"
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout_seconds: int = 120


@dataclass
class GitConfig:
    """Revision-control defaults"""
    default_branch: str = "main"


@dataclass
class ReviewConfig:
    """Report and patch settings"""
    output_path: str = "review.md"
    docs_path: str = "CHANGES.md"
    backup_suffix: str = ".backup"


@dataclass
class LoggingConfig:
    """Logging settings"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """Complete application settings"""
    llm: LLMConfig = field(default_factory=LLMConfig)
    git: GitConfig = field(default_factory=GitConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load settings from environment variables."""
        return cls(
            llm=LLMConfig(
                api_key=os.getenv("OPENAI_API_KEY"),
                model=os.getenv("REVIEW_MODEL", "gpt-4-0125-preview"),
                base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
                temperature=float(os.getenv("REVIEW_TEMPERATURE", "0.7")),
                max_tokens=int(os.getenv("REVIEW_MAX_TOKENS", "2000")),
                timeout_seconds=int(os.getenv("REVIEW_TIMEOUT", "120")),
            ),
            git=GitConfig(
                default_branch=os.getenv("REVIEW_BRANCH", "main"),
            ),
            review=ReviewConfig(
                output_path=os.getenv("REVIEW_OUTPUT", "review.md"),
                docs_path=os.getenv("REVIEW_DOCS_PATH", "CHANGES.md"),
                backup_suffix=os.getenv("REVIEW_BACKUP_SUFFIX", ".backup"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """Load settings from a YAML file; the API key falls back to the environment."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        llm_data = dict(config_data.get('llm', {}))
        llm_data.setdefault('api_key', os.getenv("OPENAI_API_KEY"))

        return cls(
            llm=LLMConfig(**llm_data),
            git=GitConfig(**config_data.get('git', {})),
            review=ReviewConfig(**config_data.get('review', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """Check settings, raising one ValueError that lists every problem."""
        errors = []

        if not self.llm.api_key:
            errors.append("OPENAI_API_KEY environment variable not set")

        if not self.llm.model:
            errors.append("Model name is required")

        if not 0.0 <= self.llm.temperature <= 2.0:
            errors.append("Temperature must be between 0.0 and 2.0")

        if self.llm.max_tokens <= 0:
            errors.append("max_tokens must be positive")

        if self.llm.timeout_seconds <= 0:
            errors.append("Timeout must be positive")

        if not self.review.backup_suffix:
            errors.append("Backup suffix cannot be empty")

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """Settings as a dictionary, without the API key."""
        return {
            'llm': {
                'model': self.llm.model,
                'base_url': self.llm.base_url,
                'temperature': self.llm.temperature,
                'max_tokens': self.llm.max_tokens,
                'timeout_seconds': self.llm.timeout_seconds,
            },
            'git': {
                'default_branch': self.git.default_branch,
            },
            'review': {
                'output_path': self.review.output_path,
                'docs_path': self.review.docs_path,
                'backup_suffix': self.review.backup_suffix,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


class ConfigManager:
    """Validates the configuration and wires up logging"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        """Current configuration"""
        return self._config

    def _setup_logging(self) -> None:
        """Configure the root logger."""
        level = logging.DEBUG if self._config.debug else getattr(logging, self._config.logging.level.upper())
        logging.basicConfig(
            level=level,
            format=self._config.logging.format,
        )

        # Rotating file output when a log file is configured
        if self._config.logging.file_path:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))

            root_logger = logging.getLogger()
            root_logger.addHandler(handler)
