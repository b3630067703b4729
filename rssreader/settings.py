# -*- coding: utf-8 -*-
#
# Copyright (c) 2026~2999 - Cologler <skyoflw@gmail.com>
# ----------
#
# ----------

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        'env_prefix': 'RSSREADER_',
    }

    config_dir: str | None = None
    url_file: str = 'urls'
    cache_file: str = 'cache.db'
    options_file: str = 'config.yml'
