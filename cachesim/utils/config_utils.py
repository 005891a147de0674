import os
import yaml
from yaml.constructor import ConstructorError
from dataclasses import MISSING, fields, is_dataclass
from enum import Enum
from typing import Any, Dict, List, TypeVar, _GenericAlias

import logging
logger = logging.getLogger(__name__)


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader resolving ``!include other.yaml`` against the including file."""

    def __init__(self, stream):
        self._root = os.path.dirname(getattr(stream, "name", ""))
        super().__init__(stream)

    def include(self, node):
        filename = os.path.join(self._root, self.construct_scalar(node))
        with open(filename, "r") as f:
            included = yaml.load(f, ConfigLoader)
        if included is None:
            raise ConstructorError(
                None, None, f"included file {filename} is empty", node.start_mark)
        return included


ConfigLoader.add_constructor("!include", ConfigLoader.include)


T = TypeVar("T")


def dict_to_dataclass(d: Any, cls: T, *, restrict_mode=True) -> T:
    if not is_dataclass(cls):
        if isinstance(cls, _GenericAlias) and cls.__origin__ is list:
            cls: List
            inner_cls = cls.__args__[0]
            return [dict_to_dataclass(x, inner_cls, restrict_mode=restrict_mode) for x in d]
        elif isinstance(cls, _GenericAlias) and cls.__origin__ is dict:
            key_type = cls.__args__[0]
            val_type = cls.__args__[1]
            return {
                key_type(k): dict_to_dataclass(v, val_type, restrict_mode=restrict_mode)
                for k, v in d.items()
            }
        if isinstance(d, cls):
            return d
        if cls in (int, bool):
            # no silent int(4.7) or bool("no")
            raise TypeError(
                f"expected {cls.__name__}, got {type(d).__name__} {d!r}")
        return cls(d)

    if not isinstance(d, dict):
        raise TypeError(
            f"expected a mapping for {cls.__name__}, got {type(d).__name__}")

    kwargs = {}
    for f in fields(cls):
        value = d.get(f.name)
        if value is not None:
            kwargs[f.name] = dict_to_dataclass(
                value, f.type, restrict_mode=restrict_mode)
        elif f.default_factory is not MISSING:
            kwargs[f.name] = f.default_factory()
        elif f.default is not MISSING:
            kwargs[f.name] = f.default
        elif restrict_mode:
            raise KeyError(f"required {f.name} is not provided")
        else:
            kwargs[f.name] = None

    unknown = set(d) - {f.name for f in fields(cls)}
    if unknown:
        logger.warning("ignoring unknown %s keys: %s",
                       cls.__name__, ", ".join(sorted(map(str, unknown))))
    return cls(**kwargs)


def load_yaml(config_path: str) -> Dict[str, Any]:
    with open(config_path) as f:
        data = yaml.load(f, ConfigLoader)
    return data or {}


def load_config(config_path: str, cls: T) -> T:
    config = dict_to_dataclass(load_yaml(config_path), cls)
    logger.debug("loaded %s from %s", cls.__name__, config_path)
    return config


class BaseEnum(Enum):
    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        value = value.lower()
        for member in cls:
            if member.name.lower() == value:
                return member
            if isinstance(member.value, str) and member.value.lower() == value:
                return member
        return None

    def __repr__(self):
        return self.name
