import json
import logging
import os

DEFAULTS = {
    'debounce_ms': 600,
    'default_time': '09:00',
    'default_max_reminders': 5,
    'timezone': None,     # None = lokale Zeitzone
    'db_path': None,      # None = ~/.duesoon/duesoon.db
}


def _config_dir():
    base = os.path.join(os.path.expanduser('~'), '.duesoon')
    os.makedirs(base, exist_ok=True)
    return base


def _config_path():
    return os.path.join(_config_dir(), 'duesoon_config.json')


def default_db_path():
    return os.path.join(_config_dir(), 'duesoon.db')


def load_config(path=None):
    path = path or _config_path()
    cfg = dict(DEFAULTS)
    if not os.path.exists(path):
        return cfg
    try:
        with open(path, 'r', encoding='utf-8') as f:
            cfg.update(json.load(f))
    except (OSError, ValueError, TypeError) as e:
        logging.warning(f"[DueSoon] Konfiguration {path} nicht lesbar, nutze Standardwerte: {e}")
        return dict(DEFAULTS)
    return cfg


def save_config(cfg: dict, path=None):
    path = path or _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)
