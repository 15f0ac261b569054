#!/usr/bin/env python3

import typing
import yaml
from dataclasses import dataclass
from dataclasses_json import dataclass_json
from omegaconf import OmegaConf


@dataclass_json
@dataclass
class ParserSettings(object):
    escapes: bool = True
    ignore_stray_text: bool = False
    encoding: str = "utf-8"
    buffer_size: int = 4096


def load_yaml_config(config_path: str) -> dict:
    """Load a YAML configuration file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def parse_config(cfg) -> ParserSettings:
    defaults = ParserSettings()
    if cfg is None or "parser_settings" not in cfg or cfg["parser_settings"] is None:
        return defaults
    parser_settings_cfg = cfg["parser_settings"]
    settings = ParserSettings(
        escapes=bool(parser_settings_cfg.get("escapes", defaults.escapes)),
        ignore_stray_text=bool(parser_settings_cfg.get("ignore_stray_text", defaults.ignore_stray_text)),
        encoding=str(parser_settings_cfg.get("encoding", defaults.encoding)),
        buffer_size=int(parser_settings_cfg.get("buffer_size", defaults.buffer_size)))
    if settings.buffer_size <= 0:
        raise ValueError(f"Invalid buffer_size {settings.buffer_size}, must be positive")
    return settings


def load_settings(config_path: typing.Optional[str] = None) -> ParserSettings:
    if config_path is None:
        return ParserSettings()
    omega_conf = OmegaConf.create(load_yaml_config(config_path))
    return parse_config(omega_conf)
