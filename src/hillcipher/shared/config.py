from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING
from os import PathLike, environ
from pathlib import Path
from tomllib import load

from pydantic import BaseModel, field_validator

from hillcipher import CONFIG_ENV_VAR

DEFAULT_CONFIG_PATH = Path("config.toml")


class General(BaseModel):
    title: str


class Database(BaseModel):
    path: str


class Logging(BaseModel):
    level: int = INFO

    @field_validator("level", mode="before")
    @classmethod
    def convert_log_level(cls, value):
        if isinstance(value, int):
            return value
        log_levels = {
            "DEBUG": DEBUG,
            "INFO": INFO,
            "WARNING": WARNING,
            "ERROR": ERROR,
            "CRITICAL": CRITICAL,
        }
        return log_levels.get(value.upper(), INFO)


class Paths(BaseModel):
    logs: str


class Auth(BaseModel):
    token_ttl: int = 3600  # seconds
    scrypt_n: int = 16384

    @field_validator("scrypt_n")
    @classmethod
    def check_power_of_two(cls, value: int) -> int:
        if value < 2 or value & (value - 1):
            raise ValueError("scrypt_n must be a power of two greater than 1")
        return value


class Cipher(BaseModel):
    filler: str = "X"

    @field_validator("filler")
    @classmethod
    def check_filler(cls, value: str) -> str:
        value = value.upper()
        if len(value) != 1 or not ("A" <= value <= "Z"):
            raise ValueError("filler must be a single letter A-Z")
        return value


class RateLimit(BaseModel):
    enabled: bool = True
    timeout_period: int
    ip_rate_limit: int


class Network(BaseModel):
    host: str
    port: int
    reload: bool

    rate_limit: RateLimit


class Config(BaseModel):
    general: General
    database: Database
    paths: Paths
    logging: Logging
    auth: Auth = Auth()
    cipher: Cipher = Cipher()
    network: Network


def load_config(
    shared_config_file: PathLike | None = None,
    specific_config_file: PathLike | None = None,
) -> Config:
    """Load and merge configurations from TOML files.

    Without an explicit path the file named by ``HILLCIPHER_CONFIG`` is used,
    falling back to ``config.toml`` in the working directory.
    """
    if shared_config_file is None:
        shared_config_file = environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)

    # Load shared config
    with Path(shared_config_file).open("rb") as f:
        config_data = load(f)

    # Load and merge specific config if provided
    if specific_config_file:
        with Path(specific_config_file).open("rb") as f:
            specific_data = load(f)
            config_data.update(specific_data)

    return Config(**config_data)
