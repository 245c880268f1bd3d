"""Configuration schema models using Pydantic."""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from jobhonter.domain.models import SearchMode

from .duration import DurationParseError, parse_duration, validate_duration_range


class SourceType(str, Enum):
    """Supported source fetcher types."""

    REDDIT = "reddit"
    REMOTEOK = "remoteok"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


DEFAULT_REMOTE_TERMS = [
    "remote",
    "work from home",
    "work-from-home",
    "wfh",
    "anywhere",
    "distributed team",
    "distributed",
    "telecommute",
    "fully remote",
]

DEFAULT_LOCATION_ALIASES: Dict[str, List[str]] = {
    "new york": ["nyc", "new york city", "manhattan", "brooklyn"],
    "san francisco": ["sf", "bay area", "silicon valley"],
    "los angeles": ["la", "l.a."],
    "london": ["ldn", "greater london"],
    "united states": ["usa", "us only", "u.s."],
    "united kingdom": ["uk", "great britain"],
    "toronto": ["gta"],
    "berlin": ["berlin, germany"],
}


def _validate_duration(value: str, min_seconds: int, max_seconds: int, label: str) -> str:
    try:
        seconds = parse_duration(value)
        validate_duration_range(seconds, min_seconds=min_seconds, max_seconds=max_seconds, label=label)
    except DurationParseError as e:
        raise ValueError(str(e)) from e
    return value


class SourceConfig(BaseModel):
    """Configuration for a single job source.

    Sources are fetched concurrently but merged in the order they are listed,
    so list order is source priority.
    """

    name: str = Field(..., min_length=1, description="Unique source name used in results")
    type: SourceType = Field(..., description="Fetcher type (reddit, remoteok)")
    enabled: bool = Field(True, description="Whether to query this source")
    timeout: str = Field("20s", description="Bound on the whole fetch for this source")
    min_request_delay: float = Field(
        1.5, ge=0.0, le=60.0, description="Minimum seconds between HTTP requests"
    )
    max_items: int = Field(200, ge=0, description="Maximum candidates kept per fetch (0 = unlimited)")
    subreddits: List[str] = Field(
        default_factory=list, description="Reddit only: communities searched in addition to site-wide"
    )

    model_config = {"use_enum_values": True}

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: str) -> str:
        return _validate_duration(v, min_seconds=1, max_seconds=300, label="Source timeout")

    @property
    def timeout_seconds(self) -> int:
        return parse_duration(self.timeout)


class SearchDefaults(BaseModel):
    """Defaults applied to requests built from the CLI."""

    mode: SearchMode = Field(SearchMode.MODERATE, description="Default matching tier")
    max_age_days: int = Field(7, gt=0, le=365)
    limit: int = Field(50, gt=0, le=1000)
    remote_only: bool = False


class ScoringWeights(BaseModel):
    """Relevance score contributions.

    Coverage dominates; the flat bonuses are small so that auxiliary signals
    alone stay under the strict threshold.
    """

    coverage_weight: float = Field(0.55, ge=0.0, le=1.0)
    phrase_bonus: float = Field(0.2, ge=0.0, le=1.0)
    remote_bonus: float = Field(0.1, ge=0.0, le=1.0)
    salary_bonus: float = Field(0.05, ge=0.0, le=1.0)
    freshness_bonus: float = Field(0.1, ge=0.0, le=1.0)
    freshness_window: str = Field("48h", description="Age under which the freshness bonus applies")

    @field_validator("freshness_window")
    @classmethod
    def validate_freshness_window(cls, v: str) -> str:
        return _validate_duration(v, min_seconds=60, max_seconds=30 * 86400, label="Freshness window")

    @property
    def freshness_window_hours(self) -> float:
        return parse_duration(self.freshness_window) / 3600.0


class ModeThresholds(BaseModel):
    """Minimum acceptance score per search mode."""

    strict: float = Field(0.6, ge=0.0, le=1.0)
    moderate: float = Field(0.25, ge=0.0, le=1.0)
    loose: float = Field(0.10, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_ordering(self):
        if not (self.strict >= self.moderate >= self.loose):
            raise ValueError(
                "Thresholds must satisfy strict >= moderate >= loose, got "
                f"{self.strict}/{self.moderate}/{self.loose}"
            )
        return self

    def for_mode(self, mode: SearchMode) -> float:
        return {
            SearchMode.STRICT: self.strict,
            SearchMode.MODERATE: self.moderate,
            SearchMode.LOOSE: self.loose,
        }[SearchMode(mode)]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format (json or key-value)")

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(15, ge=1, le=300, description="Per HTTP request timeout (seconds)")
    user_agent: str = Field(
        "JobHonter/1.0 (job search research)",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )
    max_workers: int = Field(4, ge=1, le=32, description="Concurrent source fetches per request")

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for JobHonter."""

    sources: List[SourceConfig] = Field(..., min_length=1, description="Job sources, in priority order")
    search: SearchDefaults = Field(default_factory=SearchDefaults)
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: ModeThresholds = Field(default_factory=ModeThresholds)
    vocabulary_path: Optional[Path] = Field(None, description="YAML vocabulary layered on the defaults")
    location_aliases: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_LOCATION_ALIASES.items()}
    )
    remote_terms: List[str] = Field(default_factory=lambda: list(DEFAULT_REMOTE_TERMS))
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    @field_validator("remote_terms")
    @classmethod
    def normalize_remote_terms(cls, v: List[str]) -> List[str]:
        normalized = []
        for term in v:
            stripped = term.strip().lower()
            if stripped and stripped not in normalized:
                normalized.append(stripped)
        if not normalized:
            raise ValueError("remote_terms must contain at least one term")
        return normalized

    @field_validator("location_aliases")
    @classmethod
    def normalize_location_aliases(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        return {
            key.strip().lower(): [alias.strip().lower() for alias in aliases if alias.strip()]
            for key, aliases in v.items()
            if key.strip()
        }

    @model_validator(mode="after")
    def validate_sources(self):
        if not any(source.enabled for source in self.sources):
            raise ValueError("At least one source must be enabled. All sources have enabled=false.")

        seen = set()
        for source in self.sources:
            key = source.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate source name: {source.name} appears multiple times")
            seen.add(key)

        return self

    def get_enabled_sources(self) -> List[SourceConfig]:
        """Enabled sources in priority order."""
        return [source for source in self.sources if source.enabled]
