# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

import os
from contextlib import suppress
from logging import getLogger

import yaml
from cachetools import cachedmethod
from pydantic import BaseModel, ValidationError

from .settings import Settings
from .stores import SqliteRssStore, open_store

logger = getLogger(__name__)

CONFIG_SUBDIR = '.rssreader'


class ConfigError(Exception):
    pass


class Options(BaseModel):
    kept_count: int | None = None
    proxy: str | None = None
    proxies: dict[str, str] | None = None
    timeout: float = 60
    user_agent: str | None = None


def get_home_dir() -> str:
    if home := os.environ.get('HOME'):
        return home
    try:
        import pwd
        return pwd.getpwuid(os.getuid()).pw_dir
    except (ImportError, KeyError) as error:
        raise ConfigError(
            "couldn't determine home directory! "
            f'Please set the HOME environment variable or add a valid user for UID {os.getuid()}!'
        ) from error


class UrlFile:
    '''
    The plaintext url list, one url per line.
    '''

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> list[str]:
        urls: list[str] = []
        with suppress(FileNotFoundError):
            with open(self.path, mode='r', encoding='utf8') as fp:
                for line in fp:
                    url = line.strip()
                    if url and not url.startswith('#') and url not in urls:
                        urls.append(url)
            logger.info('Load %d urls from %s', len(urls), self.path)
        return urls

    def write(self, urls: list[str]) -> None:
        with open(self.path, mode='w', encoding='utf8') as fp:
            fp.writelines(url + '\n' for url in urls)
        logger.info('Write %d urls to %s', len(urls), self.path)


class ConfigHelper:
    def __init__(self, settings: Settings) -> None:
        self.__settings = settings
        self.__options: Options | None = None
        self._cache = {}

    @property
    def config_dir(self) -> str:
        if (config_dir := self.__settings.config_dir) is None:
            config_dir = os.path.join(get_home_dir(), CONFIG_SUBDIR)
        return config_dir

    def _resolve(self, name: str) -> str:
        return os.path.join(self.config_dir, os.path.expanduser(name))

    @property
    def url_path(self) -> str:
        return self._resolve(self.__settings.url_file)

    @property
    def cache_path(self) -> str:
        return self._resolve(self.__settings.cache_file)

    @property
    def options_path(self) -> str:
        return self._resolve(self.__settings.options_file)

    def ensure_config_dir(self) -> None:
        os.makedirs(self.config_dir, mode=0o700, exist_ok=True)

    def load_urls(self) -> list[str]:
        return UrlFile(self.url_path).load()

    def write_urls(self, urls: list[str]) -> None:
        UrlFile(self.url_path).write(urls)

    @property
    def options(self) -> Options:
        if self.__options is None:
            self.__options = self._load_options(self.options_path)
        return self.__options

    def _load_options(self, path: str) -> Options:
        data = None
        with suppress(FileNotFoundError):
            with open(path, mode='r', encoding='utf8') as fp:
                try:
                    data = yaml.safe_load(fp)
                except yaml.YAMLError as error:
                    raise ConfigError(f'Invalid config file {path}: {error}') from error
                logger.info('Load options from %s', path)
        try:
            return Options.model_validate(data or {})
        except ValidationError as error:
            raise ConfigError(f'Invalid config file {path}: {error}') from error

    def open_store(self) -> SqliteRssStore:
        return open_store(self.cache_path)

    @cachedmethod(cache=lambda x: x._cache)
    def init_store(self) -> None:
        '''
        This method is cached so it is safe to call multi times.
        '''
        logger.info('Init store at %s', self.cache_path)
        with self.open_store() as store:
            store.init_store()
            store.commit()
