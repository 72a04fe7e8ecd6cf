from clipstash.utils.config import AppConfig
from clipstash.utils.dispatcher import Dispatcher
from clipstash.utils.settings_store import SettingsStore

__all__ = [
    'AppConfig',
    'Dispatcher',
    'SettingsStore',
]
