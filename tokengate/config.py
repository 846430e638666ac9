"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./tokengate.db"
    encryption_key: str = ""  # Fernet key for stored API secrets; generate with: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3001"]  # demo client

    # Session tokens
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_seconds: int = 3600  # 1 hour
    refresh_token_expire_seconds: int = 7 * 24 * 3600  # 7 days

    # Solana RPC endpoints; an empty value disables the network
    solana_testnet_rpc: str = "https://api.testnet.solana.com"
    solana_mainnet_rpc: str = "https://api.mainnet-beta.solana.com"
    rpc_timeout_seconds: float = 10.0

    # Balance cache
    balance_cache_ttl_seconds: float = 60.0
    balance_cache_max_entries: int = 10_000

    # Limits on caller-supplied access levels
    max_access_levels: int = 20
    max_token_requirements: int = 10

    model_config = {"env_prefix": "TG_", "env_file": ".env"}

    @property
    def rpc_endpoints(self) -> dict[str, str]:
        endpoints = {
            "testnet": self.solana_testnet_rpc,
            "mainnet": self.solana_mainnet_rpc,
        }
        return {network: url for network, url in endpoints.items() if url}


settings = Settings()
