from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Claude API Configuration
    anthropic_api_key: str = "your_claude_api_key_here"
    
    # Database Configuration
    database_url: str = "sqlite:///./advocate_ai.db"
    
    # Application Configuration
    secret_key: str = "your_secret_key_here"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    
    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = True
    
    # Claude Model Configuration
    claude_model: str = "claude-sonnet-4-20250514"
    temperature: float = 0.7
    top_p: float = 0.8
    top_k: int = 40
    max_output_tokens: int = 2048

    # Prompt assembly
    max_document_length: int = 10000

# Global settings instance
settings = Settings()
