import tomllib
from decimal import Decimal
from pathlib import Path

import tomlkit
from pydantic import Field, HttpUrl, WebsocketUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from curvekit.constants import (
    DEFAULT_ESTIMATE_SLIPPAGE,
    DEFAULT_EXECUTE_SLIPPAGE,
    DEFAULT_GAS_MULTIPLIER,
    DELEGATED_COMPUTATION_TIMEOUT,
)
from curvekit.logging import logger
from curvekit.types.aliases import ChainId

CONFIG_DIR = Path.home() / ".config" / "curvekit"
CONFIG_FILE = CONFIG_DIR / "config.toml"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CURVEKIT_", frozen=True)

    # Percent values, e.g. 0.5 == 0.5%
    default_slippage: Decimal = Field(default=DEFAULT_EXECUTE_SLIPPAGE, ge=0, lt=100)
    estimate_slippage: Decimal = Field(default=DEFAULT_ESTIMATE_SLIPPAGE, ge=0, lt=100)

    gas_multiplier: Decimal = Field(default=DEFAULT_GAS_MULTIPLIER, ge=1)
    infinite_approve: bool = True
    delegated_timeout: float = Field(default=DELEGATED_COMPUTATION_TIMEOUT, gt=0)
    rpc: dict[ChainId, HttpUrl | WebsocketUrl | Path] = Field(default_factory=dict)

    @field_validator("rpc", mode="after")
    def validate_paths(
        cls,  # noqa: N805
        rpc_dict: dict[ChainId, HttpUrl | WebsocketUrl | Path],
    ) -> dict[ChainId, HttpUrl | WebsocketUrl | Path]:
        """
        Validate the endpoints.

        This will convert all file paths to an absolute reference, leaving HTTP and WS URLs as-is.
        """

        return {
            chain_id: endpoint.expanduser().absolute() if isinstance(endpoint, Path) else endpoint
            for chain_id, endpoint in rpc_dict.items()
        }


def load_config_from_file(config_path: Path) -> Settings:
    return Settings.model_validate(
        tomllib.loads(
            config_path.read_text(),
        ),
    )


def save_config_to_file(config: Settings, config_path: Path = CONFIG_FILE) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        tomlkit.dumps(
            {
                "default_slippage": str(config.default_slippage),
                "estimate_slippage": str(config.estimate_slippage),
                "gas_multiplier": str(config.gas_multiplier),
                "infinite_approve": config.infinite_approve,
                "delegated_timeout": config.delegated_timeout,
                "rpc": {str(chain_id): str(endpoint) for chain_id, endpoint in config.rpc.items()},
            }
        ),
    )
    logger.info(f"Saved configuration to {config_path}.")


def load_settings() -> Settings:
    if CONFIG_FILE.exists():
        return load_config_from_file(CONFIG_FILE)
    return Settings()


settings = load_settings()
