"""
Configuration module for Smart Flow.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from agents import ModelSettings

# Load environment variables
load_dotenv()


@dataclass
class SmartFlowConfig:
    """Configuration settings for Smart Flow."""

    # OpenAI settings
    openai_api_key: str = ""
    enrichment_model: str = "gpt-4.1-mini"

    # Enrichment should be reproducible for identical form data
    enrichment_temperature: float = 0.0
    enrichment_max_tokens: int | None = None

    # Locale used when a composite default depends on it (currency)
    default_locale: str = "en-US"

    # MCP Server settings
    mcp_transport: str = "stdio"  # stdio or sse
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8080

    # Guardrail settings
    enable_guardrails: bool = True

    # Tracing settings
    enable_tracing: bool = True
    trace_name_prefix: str = "smart-flow"

    # Logging
    log_level: str = "INFO"

    def get_model_settings(self) -> ModelSettings:
        """Get ModelSettings instance for the enrichment agent."""
        return ModelSettings(
            temperature=self.enrichment_temperature,
            max_tokens=self.enrichment_max_tokens,
        )

    @classmethod
    def from_env(cls) -> "SmartFlowConfig":
        """
        Create configuration from environment variables.

        Unset variables fall back to the class field defaults.
        """
        _defaults = cls()

        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", _defaults.openai_api_key),
            enrichment_model=os.getenv("OPENAI_MODEL", _defaults.enrichment_model),
            enrichment_temperature=float(os.getenv("SMART_FLOW_TEMPERATURE", str(_defaults.enrichment_temperature))),
            default_locale=os.getenv("SMART_FLOW_DEFAULT_LOCALE", _defaults.default_locale),
            mcp_transport=os.getenv("MCP_TRANSPORT", _defaults.mcp_transport),
            mcp_host=os.getenv("MCP_HOST", _defaults.mcp_host),
            mcp_port=int(os.getenv("MCP_PORT", str(_defaults.mcp_port))),
            enable_guardrails=os.getenv("SMART_FLOW_ENABLE_GUARDRAILS", str(_defaults.enable_guardrails).lower()).lower() == "true",
            enable_tracing=os.getenv("OPENAI_AGENTS_DISABLE_TRACING", "0" if _defaults.enable_tracing else "1") != "1",
            log_level=os.getenv("SMART_FLOW_LOG_LEVEL", _defaults.log_level).upper(),
        )


config = SmartFlowConfig.from_env()


def get_config() -> SmartFlowConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> SmartFlowConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
