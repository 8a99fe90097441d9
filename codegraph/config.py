from pathlib import Path
from typing import Optional, List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Extraction Configuration
    supported_extensions: str = Field(
        default=".py,.java,.js,.jsx,.ts,.tsx,.c,.cpp,.cs,.rb,.php,.go,.rs,.kt,.swift,.scala,.dart,.html,.css,.scss,.sql,.json,.yaml,.yml,.xml,.md",
    )
    max_files: int = Field(default=5000, ge=1)
    max_file_size: int = Field(default=10 * 1024 * 1024, ge=1)

    # Output Configuration
    graph_output: str = Field(default="knowledge_graph.json")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    @property
    def supported_extensions_list(self) -> List[str]:
        """Get supported extensions as a list."""
        return [ext.strip().lower() for ext in self.supported_extensions.split(",") if ext.strip()]

    @property
    def log_dir(self) -> Optional[Path]:
        """Get log directory path."""
        if not self.log_file:
            return None
        return Path(self.log_file).parent


settings = Settings()
