"""Service configuration and the factory that loads it and sets up logging."""

from __future__ import annotations

import json
import logging
import os
import sys
import urllib.request
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from asdbatch.formats import _decode, _json

_log = logging.getLogger(__name__)

_SERVICES = ("Benz", "Bentley", "Saturn", "Ferrari", "Tesla")


@dataclass
class ServiceConfig:
    """Connection settings of one member service."""

    middle_conf: dict[str, Any] = _json("MIDDLECONF", factory=dict)
    tcrs_url: str = _json("TcrsURL", "")

    @property
    def dmrs_url(self) -> str:
        return str(self.middle_conf.get("DMRSURL", ""))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ServiceConfig:
        return _decode(cls, data)


@dataclass
class Config:
    """The batch's configuration file."""

    saturn: ServiceConfig = _json("SATURN", factory=ServiceConfig)
    bentley: ServiceConfig = _json("BENTLEY", factory=ServiceConfig)
    tesla: ServiceConfig = _json("TESLA", factory=ServiceConfig)
    benz: ServiceConfig = _json("BENZ", factory=ServiceConfig)
    ferrari: ServiceConfig = _json("FERRARI", factory=ServiceConfig)
    delay_sec_skt: int = _json("DelaySecSKT", 0)
    delay_sec_kt: int = _json("DelaySecKT", 0)
    delay_sec_lgup: int = _json("DelaySecLGUP", 0)
    max_member_list: int = _json("MaxMemberList", 0)
    skt_process: bool = _json("SKTProcess", False)
    kt_process: bool = _json("KTProcess", False)
    lgup_process: bool = _json("LGUPProcess", False)
    saturn_process: bool = _json("SaturnProcess", False)
    bentley_process: bool = _json("BentleyProcess", False)
    benz_process: bool = _json("BenzProcess", False)
    tesla_process: bool = _json("TeslaProcess", False)
    ferrari_process: bool = _json("FerrariProcess", False)
    logger_file_path: str = _json("LogerfilePath", "")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        return _decode(cls, data)

    def active_service(self) -> str | None:
        """The first enabled service, in the order Benz, Bentley, Saturn, Ferrari, Tesla."""
        return next(
            (name for name in _SERVICES if getattr(self, f"{name.lower()}_process")),
            None,
        )

    def service_config(self) -> ServiceConfig | None:
        """Settings of the active service, or None when none is enabled."""
        name = self.active_service()
        return None if name is None else getattr(self, name.lower())


@dataclass
class Factory:
    """Loads the configuration and provides the logger shared by the batch."""

    json_config_path: str = "./"
    json_config_url: str = ""
    config_set: str = ""
    host_name: str = ""
    config: Config = field(default_factory=Config)
    config_map: dict[str, Any] = field(default_factory=dict)
    logger: logging.Logger | None = None
    _handlers: list[logging.Handler] = field(default_factory=list, init=False, repr=False)

    def load_configuration(self, path: str) -> None:
        """Read the configuration file, first fetching it when the set is LIVE.

        A missing or malformed file leaves the defaults; a field of the wrong
        type raises ValueError.
        """
        if self.config_set == "LIVE":
            try:
                os.mkdir(self.json_config_path)
            except OSError as exc:
                _log.warning("could not create config directory: %s", exc)
            try:
                with urllib.request.urlopen(self.json_config_url, timeout=30) as response:
                    Path(path).write_bytes(response.read())
            except (OSError, ValueError) as exc:
                _log.error("config download failed: %s", exc)

        try:
            doc = json.loads(Path(path).read_bytes())
        except (OSError, ValueError):
            doc = None
        self.config_map = doc if isinstance(doc, dict) else {}
        self.config = Config.from_dict(self.config_map)

    def initialize(self) -> None:
        """Load ``config.json`` from the config path and open the log file."""
        self.load_configuration(self.json_config_path + "config.json")
        self._close_handlers()

        pattern = f"{self.config.logger_file_path}_{self.host_name}.log"
        filename = Path(datetime.now().strftime(pattern))
        filename.parent.mkdir(parents=True, exist_ok=True)

        formatter = logging.Formatter(
            "time=%(asctime)s level=%(levelname)s msg=%(message)s", "%Y-%m-%d %H:%M:%S"
        )
        logger = logging.getLogger("asdbatch")
        logger.setLevel(logging.DEBUG)
        for handler in (
            logging.FileHandler(filename, encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ):
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            self._handlers.append(handler)
        self.logger = logger

    def reload_config(self, app_env: str | None = None) -> None:
        """Reload ``config.json`` from ``app_env``, $APP_HOME or the current directory."""
        if app_env is None:
            app_env = os.environ.get("APP_HOME", "")
        self.load_configuration((app_env or "./") + "config.json")

    def print(self, header: Any, *args: Any) -> None:
        """Log a line tagged with ``header``."""
        (self.logger or _log).info(
            "[REQUESTID][%s][%s]", header, " ".join(str(a) for a in args)
        )

    def _close_handlers(self) -> None:
        logger = logging.getLogger("asdbatch")
        for handler in self._handlers:
            logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()

    def __enter__(self) -> Factory:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._close_handlers()