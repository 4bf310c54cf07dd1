# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2026/10/18 14:00:05
# @Author : EchoCapture contributors

import logging

from .ini import (
    IniDocument, IniSection, IniLine, IniParser,
    IniJsonParser, IniYamlParser, parse
)
from .presets import ensure_defaults, load_presets, read_preset

__all__ = [
    'IniDocument', 'IniSection', 'IniLine', 'IniParser',
    'IniJsonParser', 'IniYamlParser', 'parse',
    'ensure_defaults', 'load_presets', 'read_preset'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
