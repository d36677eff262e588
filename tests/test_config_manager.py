"""
Configuration manager tests
Verifies the multi-level priority loading of test scenarios
"""
import pytest

from tests.config_manager import CONFIG_PATH_ENV, DEFAULT_SCENARIOS, load_config, load_config_from_file

MYSQL_ENV = {
    "MYSQL_HOST": "env_host",
    "MYSQL_PORT": "3308",
    "MYSQL_USER": "env_user",
    "MYSQL_PASSWORD": "env_password",
    "MYSQL_DATABASE": "env_db",
}


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    for name in MYSQL_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_load_config_from_env_var(clean_env, tmp_path):
    """Test loading the file named by the environment variable"""
    config_file = tmp_path / "custom.yaml"
    config_file.write_text(
        "scenarios:\n"
        "  mysql80:\n"
        "    backend: mysql\n"
        "    host: test_host\n"
        "    port: 3307\n"
        "    database: test_db\n",
        encoding="utf-8",
    )
    clean_env.setenv(CONFIG_PATH_ENV, str(config_file))

    config = load_config(tmp_path / "unused")

    assert config["scenarios"]["mysql80"]["host"] == "test_host"
    assert config["scenarios"]["mysql80"]["port"] == 3307


def test_missing_env_var_file(clean_env, tmp_path):
    """Test that a missing file named by the environment variable is an error"""
    clean_env.setenv(CONFIG_PATH_ENV, str(tmp_path / "missing.yaml"))

    with pytest.raises(FileNotFoundError):
        load_config(tmp_path)


def test_load_config_from_default_yaml(clean_env, tmp_path):
    """Test loading scenarios.yaml from the configuration directory"""
    (tmp_path / "scenarios.yaml").write_text(
        "scenarios:\n"
        "  sqlite_file:\n"
        "    backend: sqlite\n"
        "    database: northwind.db\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert list(config["scenarios"]) == ["sqlite_file"]
    assert config["scenarios"]["sqlite_file"]["database"] == "northwind.db"


def test_toml_takes_priority_over_yaml(clean_env, tmp_path):
    """Test that scenarios.toml wins over scenarios.yaml"""
    (tmp_path / "scenarios.yaml").write_text("scenarios:\n  from_yaml:\n    backend: sqlite\n", encoding="utf-8")
    (tmp_path / "scenarios.toml").write_text(
        "[scenarios.from_toml]\n"
        "backend = \"sqlite\"\n"
        "schema = \"northwind\"\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert list(config["scenarios"]) == ["from_toml"]
    assert config["scenarios"]["from_toml"]["schema"] == "northwind"


def test_load_config_from_mysql_env_vars(clean_env, tmp_path):
    """Test adding a MySQL scenario from environment variables"""
    for name, value in MYSQL_ENV.items():
        clean_env.setenv(name, value)

    config = load_config(tmp_path)

    scenario = config["scenarios"]["mysql_environment"]
    assert scenario["backend"] == "mysql"
    assert scenario["host"] == "env_host"
    assert scenario["port"] == 3308
    assert scenario["username"] == "env_user"
    assert scenario["database"] == "env_db"
    assert "sqlite_memory" in config["scenarios"]


def test_incomplete_mysql_env_vars_are_ignored(clean_env, tmp_path):
    """Test that a partial set of MySQL environment variables adds nothing"""
    clean_env.setenv("MYSQL_HOST", "env_host")

    config = load_config(tmp_path)

    assert "mysql_environment" not in config["scenarios"]


def test_builtin_scenarios(clean_env, tmp_path):
    """Test the built-in SQLite scenarios when nothing is configured"""
    config = load_config(tmp_path)

    assert config["scenarios"] == DEFAULT_SCENARIOS
    assert config["scenarios"] is not DEFAULT_SCENARIOS


def test_unsupported_format(tmp_path):
    """Test that only YAML and TOML files are accepted"""
    config_file = tmp_path / "scenarios.json"
    config_file.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported configuration file format"):
        load_config_from_file(config_file)


def test_missing_scenarios_key(tmp_path):
    """Test that a configuration file must define scenarios"""
    config_file = tmp_path / "scenarios.yaml"
    config_file.write_text("databases: {}\n", encoding="utf-8")

    with pytest.raises(ValueError, match="does not contain 'scenarios' key"):
        load_config_from_file(config_file)
