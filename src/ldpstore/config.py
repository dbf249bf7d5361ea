import copy
import logging
import os
from typing import IO, Any, Mapping

import yaml

from ldpstore.auth import get_authenticator
from ldpstore.errors import ConfigError
from ldpstore.store import Store
from ldpstore.transport import DefaultTransport

logger = logging.getLogger(__name__)

DEFAULT_LOGGING_OPTIONS = {
    'version': 1,
    'formatters': {
        'full': {
            'format': '%(levelname)s|%(asctime)s|%(threadName)s|%(name)s|%(message)s'
        },
        'messageonly': {
            'format': '%(message)s'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'messageonly',
            'stream': 'ext://sys.stderr'
        },
    },
    'loggers': {
        '__main__': {
            'level': 'DEBUG',
            'handlers': ['console'],
            'propagate': False
        },
        'ldpstore': {
            'level': 'DEBUG',
            'handlers': ['console'],
            'propagate': False
        },
        # connection pool chatter
        'urllib3': {
            'level': 'WARNING'
        }
    },
    'root': {
        'level': 'DEBUG'
    }
}

STORE_OPTIONS = {
    'DEFAULT_READ_FORMAT': 'default_read_format',
    'DEFAULT_WRITE_FORMAT': 'default_write_format',
    'DEFAULT_PATCH_FORMAT': 'default_patch_format',
    'ALLOW_STATUS_ZERO': 'allow_status_zero',
}


def envsubst(value: str | list | dict, env: Mapping[str, str] = None) -> str | list | dict:
    """
    Recursively replace `${VAR_NAME}` placeholders in value with the values of the
    corresponding keys of env. If env is not given, it defaults to the environment
    variables in os.environ.

    Any placeholders that do not have a corresponding key in the env dictionary
    are left as is.
    """
    if env is None:
        env = os.environ
    if isinstance(value, str):
        if '${' in value:
            try:
                return value.replace('${', '{').format(**env)
            except KeyError as e:
                missing_key = str(e.args[0])
                logger.warning(f'Environment variable ${{{missing_key}}} not found')
                # for a missing key, just return the string without substitution
                return envsubst(value, {missing_key: f'${{{missing_key}}}', **env})
        else:
            return value
    elif isinstance(value, list):
        return [envsubst(v, env) for v in value]
    elif isinstance(value, dict):
        return {k: envsubst(v, env) for k, v in value.items()}
    else:
        return value


def load_config(config_file: IO) -> dict[str, Any]:
    """Read a YAML configuration file, substituting environment variables."""
    try:
        config = yaml.safe_load(config_file)
    except yaml.YAMLError as e:
        raise ConfigError(f'Unable to read configuration: {e}') from e
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError('Configuration must be a mapping')
    return envsubst(config)


def store_from_config(config: Mapping[str, Any]) -> Store:
    """Build a `Store` from the `STORE` section of `config`, using the
    default format registries and a `DefaultTransport`."""
    store_config = config.get('STORE') or {}
    if not isinstance(store_config, Mapping):
        raise ConfigError("Configuration section 'STORE' must be a mapping")

    transport = DefaultTransport(
        auth=get_authenticator(store_config),
        server_cert=store_config.get('SERVER_CERT'),
        ua_string=store_config.get('USER_AGENT'),
        on_behalf_of=store_config.get('ON_BEHALF_OF'),
    )
    options = {
        name: store_config[key] for key, name in STORE_OPTIONS.items() if key in store_config
    }
    if not isinstance(options.get('allow_status_zero', True), bool):
        raise ConfigError('ALLOW_STATUS_ZERO must be true or false')

    store = Store(transport=transport, **options)
    logger.debug(f'Read format: {store.default_read_format}')
    logger.debug(f'Write format: {store.default_write_format}')
    logger.debug(f'Patch format: {store.default_patch_format}')
    return store


def logging_options(config: Mapping[str, Any], log_filename: str = None) -> dict[str, Any]:
    """Return a `logging.config.dictConfig()` dictionary. Loads it from the
    file named by `LOGGING_CONFIG` if set, otherwise starts from
    `DEFAULT_LOGGING_OPTIONS`. If `LOG_DIR` is set, adds a file handler
    writing to `log_filename` in that directory."""
    store_config = config.get('STORE') or {}
    if 'LOGGING_CONFIG' in store_config:
        with open(store_config['LOGGING_CONFIG'], 'r') as logging_config_file:
            return yaml.safe_load(logging_config_file)

    options = copy.deepcopy(DEFAULT_LOGGING_OPTIONS)
    log_dirname = store_config.get('LOG_DIR')
    if log_dirname is not None and log_filename is not None:
        if not os.path.isdir(log_dirname):
            os.makedirs(log_dirname)
        options['handlers']['file'] = {
            'class': 'logging.FileHandler',
            'level': 'DEBUG',
            'formatter': 'full',
            'filename': os.path.join(log_dirname, log_filename),
        }
        for name in ('__main__', 'ldpstore'):
            options['loggers'][name]['handlers'].append('file')
    return options
