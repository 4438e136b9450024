from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import sys


class ConfigurationError(ValueError):
    pass


_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ClientSettings:
    base_url: str | None = None
    response_type: str = "json"
    explicit_logout: bool = False
    timeout_seconds: float | None = None
    local_error_delay_seconds: float = 0.5
    verify_tls: bool = True

    @staticmethod
    def from_env() -> "ClientSettings":
        _load_dotenv_if_present()

        base_url = os.getenv("DAL_BASE_URL", "").strip() or None
        response_type = os.getenv("DAL_RESPONSE_TYPE", "json").strip().lower()
        explicit_logout = _parse_bool("DAL_EXPLICIT_LOGOUT", os.getenv("DAL_EXPLICIT_LOGOUT", "no"))

        raw_timeout = os.getenv("DAL_TIMEOUT_SECONDS", "").strip()
        timeout_seconds = _parse_float("DAL_TIMEOUT_SECONDS", raw_timeout) if raw_timeout else None

        local_error_delay_seconds = _parse_float(
            "DAL_LOCAL_ERROR_DELAY_SECONDS",
            os.getenv("DAL_LOCAL_ERROR_DELAY_SECONDS", "0.5"),
        )
        verify_tls = _parse_bool("DAL_VERIFY_TLS", os.getenv("DAL_VERIFY_TLS", "yes"))

        settings = ClientSettings(
            base_url=base_url,
            response_type=response_type,
            explicit_logout=explicit_logout,
            timeout_seconds=timeout_seconds,
            local_error_delay_seconds=local_error_delay_seconds,
            verify_tls=verify_tls,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.base_url is not None and not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError("DAL_BASE_URL must start with http:// or https://")

        if self.response_type not in ("json", "xml", "JSON", "XML"):
            raise ConfigurationError("DAL_RESPONSE_TYPE must be one of: json, xml")

        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigurationError("DAL_TIMEOUT_SECONDS must be greater than 0")

        if self.local_error_delay_seconds < 0:
            raise ConfigurationError("DAL_LOCAL_ERROR_DELAY_SECONDS must be 0 or greater")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean (yes/no)")


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as error:
        raise ConfigurationError(f"{name} must be a number") from error


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    for candidate in _candidate_env_files(file_name):
        _load_env_file(candidate)


def _candidate_env_files(file_name: str) -> list[Path]:
    candidates: list[Path] = []

    explicit = os.getenv("DAL_ENV_FILE", "").strip()
    if explicit:
        candidates.append(Path(explicit).expanduser())

    candidates.append(Path.cwd() / file_name)

    if getattr(sys, "frozen", False):
        candidates.append(Path(sys.executable).resolve().parent / file_name)

    unique_candidates: list[Path] = []
    seen: set[str] = set()
    for path in candidates:
        normalized = str(path.resolve()) if path.exists() else str(path)
        if normalized in seen:
            continue
        seen.add(normalized)
        unique_candidates.append(path)
    return unique_candidates


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return

    try:
        with path.open("r", encoding="utf-8") as env_file:
            for raw_line in env_file:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")

                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        return
