"""Unit tests for application settings configuration."""

from pathlib import Path

from formhistory.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized



def test_version_access_roles_are_normalised():
    """Role names are matched case-insensitively against the X-User-Roles header."""
    settings = Settings(version_access_roles=[" Admin", "DOCTOR", ""])

    assert settings.version_access_roles == ["admin", "doctor"]
