from shortlinks.utils.config import app_env, app_name, app_prefix, project_root, load_config
from shortlinks.utils.helpers import get_short_url, isoformat_utc, load_yaml
from shortlinks.utils.shortener import generate_shortcode
from shortlinks.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'get_short_url',
    'isoformat_utc',
    'load_yaml',
    'initialize_logging',
]
