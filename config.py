import os

import yaml

REQUIRED_KEYS = ('account', 'access_key')
ENV_OVERRIDES = {
    'account': 'AZURE_STORAGE_ACCOUNT',
    'access_key': 'AZURE_STORAGE_KEY',
}


def load_config(profile: str, config_file: str = ".config.yaml") -> dict:
    """Load the storage account settings of a profile from the YAML file."""
    with open(config_file, "r") as f:
        full_config = yaml.safe_load(f) or {}

    if profile not in full_config:
        raise ValueError(f"Profile '{profile}' not found in {config_file}")

    conf = dict(full_config[profile] or {})
    for key, env_name in ENV_OVERRIDES.items():
        if os.environ.get(env_name):
            conf[key] = os.environ[env_name]

    for key in REQUIRED_KEYS:
        if not conf.get(key):
            raise ValueError(f"Missing '{key}' in config for profile '{profile}'")
    return conf
