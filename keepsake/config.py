from __future__ import annotations

import dataclasses
import datetime
import os
import pathlib
import typing

from starlette.config import Config as BaseConfig
from starlette.config import Environ

from keepsake.exceptions import ImproperlyConfigured

__all__ = ["Config", "CookieConfig", "CookieOverrides", "load_cookie_config", "DEFAULT_REMEMBER_ME_FOR"]

DEFAULT_REMEMBER_ME_FOR = datetime.timedelta(days=90)


@dataclasses.dataclass(frozen=True)
class CookieConfig:
    """
    Class level defaults of the credentials cookie.

    `cookie_key` set to None means "derive from the session class name".
    """

    cookie_key: str | None = None
    remember_me: bool = False
    remember_me_for: datetime.timedelta = DEFAULT_REMEMBER_ME_FOR
    secure: bool = False
    sign_cookie: bool = False
    httponly: bool = False

    def replace(self, **changes: typing.Any) -> CookieConfig:
        return dataclasses.replace(self, **changes)


@dataclasses.dataclass
class CookieOverrides:
    """Per-instance overrides. None means "use the class default"."""

    cookie_key: str | None = None
    remember_me: typing.Any = None
    remember_me_for: datetime.timedelta | None = None
    secure: typing.Any = None
    sign_cookie: typing.Any = None
    httponly: typing.Any = None


class Config(BaseConfig):
    def __init__(
        self,
        env_files: list[str | pathlib.Path] | None = None,
        env_prefix: str = "",
        environ: typing.Mapping[str, str] | None = None,
    ):
        env_files = env_files or []
        super().__init__(None, Environ() if environ is None else environ, env_prefix)
        for env_file in env_files:
            if os.path.exists(env_file) and os.path.isfile(env_file):
                self.file_values.update(self._read_file(env_file))


def load_cookie_config(
    config: BaseConfig,
    prefix: str = "KEEPSAKE_",
    defaults: CookieConfig | None = None,
) -> CookieConfig:
    """
    Read cookie settings from environment.

    Recognized variables (with the default prefix): KEEPSAKE_COOKIE_KEY,
    KEEPSAKE_REMEMBER_ME, KEEPSAKE_REMEMBER_ME_FOR (seconds), KEEPSAKE_SECURE,
    KEEPSAKE_SIGN_COOKIE, KEEPSAKE_HTTPONLY.
    """
    defaults = defaults or CookieConfig()
    try:
        remember_me_for = config(
            f"{prefix}REMEMBER_ME_FOR",
            cast=int,
            default=int(defaults.remember_me_for.total_seconds()),
        )
        options = CookieConfig(
            cookie_key=config(f"{prefix}COOKIE_KEY", default=defaults.cookie_key),
            remember_me=config(f"{prefix}REMEMBER_ME", cast=bool, default=defaults.remember_me),
            remember_me_for=datetime.timedelta(seconds=remember_me_for),
            secure=config(f"{prefix}SECURE", cast=bool, default=defaults.secure),
            sign_cookie=config(f"{prefix}SIGN_COOKIE", cast=bool, default=defaults.sign_cookie),
            httponly=config(f"{prefix}HTTPONLY", cast=bool, default=defaults.httponly),
        )
    except ValueError as ex:
        raise ImproperlyConfigured(str(ex)) from ex

    if remember_me_for <= 0:
        raise ImproperlyConfigured(f"{prefix}REMEMBER_ME_FOR must be a positive number of seconds.")
    return options
