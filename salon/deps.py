# salon/deps.py

from functools import lru_cache

from .data import SalonConfig, load_config
from .notifications import Notifiers, build_notifiers
from .settings import SALON_CONFIG_PATH


@lru_cache
def get_config() -> SalonConfig:
    return load_config(SALON_CONFIG_PATH)


@lru_cache
def get_notifiers() -> Notifiers:
    return build_notifiers()
