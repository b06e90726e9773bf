"""Hill cipher text service."""

__version__ = "0.1.0"

# Environment variable naming the TOML configuration file
CONFIG_ENV_VAR = "HILLCIPHER_CONFIG"
