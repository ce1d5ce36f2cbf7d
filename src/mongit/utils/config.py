"""
config handling for dynaconf
"""
import os
import sys
from importlib.resources import files
from pathlib import Path

from dynaconf import Dynaconf, Validator
from loguru import logger


def parse_config(config_folder: Path) -> Dynaconf:
    """
    Parse the config files in config_folder.
    The default config is created from the packaged one if it is missing.
    :param config_folder: folder containing default.toml and an optional config.toml
    :return: settings
    """
    config_folder = Path(config_folder)
    default_config = config_folder / 'default.toml'
    if not os.path.isfile(default_config):
        try:
            config_folder.mkdir(parents=True, exist_ok=True)
            with open(default_config, 'w', encoding='utf-8') as f:
                f.write(files('mongit.data').joinpath('default.toml').read_text())
        except Exception as e:
            logger.critical(f'Failed to create default config {default_config}. '
                            'Consider making the folder writeable for this user '
                            f'or choose a different path. Error: {e}')
            sys.exit(1)

    settings = Dynaconf(
        envvar_prefix='MONGIT',
        settings_files=['default.toml', 'config.toml'],
        root_path=str(config_folder),
        merge_enabled=True,
        validators=[
            Validator('git.binary', default='git'),
            Validator('git.message_prefix', default='mongit-', len_min=1),
            Validator('docker.binary', default='docker'),
            Validator('docker.dump_dir', default='/opt/dump'),
            Validator('mongo.dump_binary', default='mongodump'),
            Validator('mongo.restore_binary', default='mongorestore'),
            Validator('mongo.dump_dir', default='dump'),
            Validator('mongo.drop', cast=bool, default=False),
            Validator('snapshot.rollback', cast=bool, default=False),
            Validator('logging.console_level', default='INFO'),
            Validator('logging.level', default='INFO'),
        ]
    )
    return settings
