"""Configuration Management Module, implementing multi-level priority configuration mechanism"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Try to import tomllib (Python 3.11+) or tomli for older versions
try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None

CONFIG_PATH_ENV = "MAPPING_FIXTURES_CONFIG_PATH"
DEFAULT_CONFIG_DIR = Path(__file__).parent / "config"

# Scenarios that need no external service
DEFAULT_SCENARIOS: Dict[str, Dict[str, Any]] = {
    'sqlite_memory': {
        'backend': 'sqlite',
        'database': ':memory:',
    },
    'sqlite_schema': {
        'backend': 'sqlite',
        'database': ':memory:',
        'schema': 'northwind',
    },
}


def load_yaml_config(file_path: Path) -> Dict[str, Any]:
    """
    Load YAML configuration file

    Args:
        file_path: YAML file path

    Returns:
        Configuration dictionary
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}
    print(f"[INFO] Loaded configuration from {file_path}")
    return config


def load_toml_config(file_path: Path) -> Dict[str, Any]:
    """
    Load TOML configuration file

    Args:
        file_path: TOML file path

    Returns:
        Configuration dictionary
    """
    if tomllib is None:
        raise ImportError("tomllib or tomli is required to load TOML configuration files")

    with open(file_path, 'rb') as f:
        config = tomllib.load(f) or {}
    print(f"[INFO] Loaded configuration from {file_path}")
    return config


def load_config_from_file(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from file based on its extension

    Args:
        config_path: Configuration file path

    Returns:
        Configuration dictionary
    """
    suffix = config_path.suffix.lower().strip()
    if suffix in ['.yaml', '.yml']:
        config = load_yaml_config(config_path)
    elif suffix == '.toml':
        config = load_toml_config(config_path)
    else:
        raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

    if 'scenarios' not in config:
        raise ValueError(f"Configuration file {config_path} does not contain 'scenarios' key")
    return config


def _mysql_scenario_from_env() -> Optional[Dict[str, Any]]:
    mysql_host = os.getenv("MYSQL_HOST")
    mysql_port = os.getenv("MYSQL_PORT")
    mysql_user = os.getenv("MYSQL_USER")
    mysql_password = os.getenv("MYSQL_PASSWORD")
    mysql_database = os.getenv("MYSQL_DATABASE")

    if not all([mysql_host, mysql_port, mysql_user, mysql_password, mysql_database]):
        return None
    return {
        'backend': 'mysql',
        'host': mysql_host,
        'port': int(mysql_port),
        'database': mysql_database,
        'username': mysql_user,
        'password': mysql_password,
    }


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration using multi-level priority mechanism:
    1. Environment variable specified config file (MAPPING_FIXTURES_CONFIG_PATH)
    2. Default config file (scenarios.toml then scenarios.yaml/scenarios.yml in tests/config)
    3. Environment variables for MySQL connection parameters, added to the SQLite scenarios
    4. Built-in SQLite scenarios
    """
    # 1. Check environment variable for config file path
    config_file_path_env = os.getenv(CONFIG_PATH_ENV)
    if config_file_path_env:
        config_path = Path(config_file_path_env)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file {config_path} specified in {CONFIG_PATH_ENV} does not exist"
            )
        print(f"[INFO] Using configuration file from environment variable: {config_path}")
        return load_config_from_file(config_path)

    # 2. Check default config files, prioritizing TOML then YAML
    config_dir = config_dir or DEFAULT_CONFIG_DIR
    for name in ("scenarios.toml", "scenarios.yaml", "scenarios.yml"):
        default_config_path = config_dir / name
        if default_config_path.exists():
            print(f"[INFO] Using default configuration file: {default_config_path}")
            return load_config_from_file(default_config_path)

    scenarios = {name: dict(params) for name, params in DEFAULT_SCENARIOS.items()}

    # 3. Try to get MySQL connection parameters from environment variables
    mysql_scenario = _mysql_scenario_from_env()
    if mysql_scenario:
        print("[INFO] Using MySQL connection parameters from environment variables")
        scenarios['mysql_environment'] = mysql_scenario

    # 4. Built-in scenarios
    return {'scenarios': scenarios}
