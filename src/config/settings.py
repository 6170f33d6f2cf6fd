"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use COWLICK_ prefix (e.g., COWLICK_DEBUG_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use COWLICK_ prefix.

    Examples:
        COWLICK_PLACEHOLDER=§
        COWLICK_FRAGMENT_TAG=section
        COWLICK_DEBUG_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="COWLICK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Extractor configuration
    placeholder: str = Field(
        default="\U0001F42E",
        min_length=1,
        max_length=1,
        description="Single sentinel character substituted for each extracted directive",
    )

    # HTML parser configuration
    fragment_container: str = Field(
        default="div",
        description="Context element html5lib parses the template fragment in",
    )

    namespace_html_elements: bool = Field(
        default=True,
        description="Record the XHTML namespace on HTML elements",
    )

    # Compilation configuration
    fragment_tag: str = Field(
        default="div",
        description="Wrapper tag used when a template renders more than one top-level node",
    )

    debug_mode: bool = Field(
        default=False,
        description="Dump the combined tree and generated source during compilation",
    )

    def placeholders_count(self, text: str, placeholder: Optional[str] = None) -> int:
        """
        Count sentinel placeholders in a string.

        Args:
            text: Rewritten template text
            placeholder: Sentinel to count instead of the configured one

        Example:
            >>> settings = AppSettings()
            >>> settings.placeholders_count('<p>\\U0001F42E</p>')
            1
        """
        return text.count(placeholder or self.placeholder)


# Singleton instance - import this in your code
appsettings = AppSettings()
