# -*- encoding: utf-8 -*-
# @File   : presets.py
# @Time   : 2026/10/18 16:48:30
# @Author : EchoCapture contributors

"""Image quality presets, as kept in the capture app's INI file.

    ```ini
    selectedPreset = standard

    [high]
    imageType = png
    pixelFormat = Format48bppRgb
    imageQuality = 100
    enableRescaling = False
    rescalingScale = 1.0
    ```

A missing value is added fresh, a value of the wrong type is reset to
its default (`ensure_defaults()`), so a damaged file heals itself.
"""

import logging
from os import PathLike
from os.path import exists
from typing import TypedDict

from .ini import IniDocument, IniParser, ValueTypeMismatch
from .ini.line import IniValue

__all__ = [
    'PresetSetting', 'PRESETS', 'KEY_SELECTED', 'DEFAULT_PRESET',
    'default_document', 'ensure_defaults', 'read_preset', 'load_presets',
]


class PresetSetting(TypedDict):
    imageType: str
    pixelFormat: str
    imageQuality: int       # 0 - 100, jpg only
    enableRescaling: bool
    rescalingScale: float


KEY_SELECTED = 'selectedPreset'
DEFAULT_PRESET = 'standard'

PRESETS: dict[str, PresetSetting] = {
    'low': PresetSetting(
        imageType='jpg',
        pixelFormat='Format16bppRgb565',
        imageQuality=50,
        enableRescaling=True,
        rescalingScale=0.5),
    'standard': PresetSetting(
        imageType='png',
        pixelFormat='Format24bppRgb',
        imageQuality=80,
        enableRescaling=False,
        rescalingScale=1.0),
    'high': PresetSetting(
        imageType='png',
        pixelFormat='Format48bppRgb',
        imageQuality=100,
        enableRescaling=False,
        rescalingScale=1.0),
}


def default_document() -> IniDocument:
    ret = IniDocument()
    ret.add_comment('; EchoCapture image quality presets')
    ret.add_value(KEY_SELECTED, DEFAULT_PRESET)
    for name, setting in PRESETS.items():
        ret.create_subsection(name)
        for k, v in setting.items():
            ret.add_value(k, v, section=name)
    return ret


def _ensure(doc: IniDocument, key: str, default: IniValue,
            section: str | None) -> int:
    where = '' if section is None else f'[{section}] '
    try:
        found, _ = doc.search(key, type(default), section=section)
    except ValueTypeMismatch as e:
        logging.warning(
            f'{where}{key} is type of {e.found.value}, '
            f'reset to {default!r}.')
        doc.set_ignoring_type(key, default, section=section)
        return 1
    if found:
        return 0
    logging.info(f'{where}{key} is missing, added {default!r}.')
    doc.add_value(key, default, section=section)
    return 1


def ensure_defaults(doc: IniDocument) -> int:
    """Add missing presets and values, reset the mistyped ones.

    Values of the right type are never touched, even if they differ
    from the defaults. Returns how many values were added or reset.
    """
    repairs = _ensure(doc, KEY_SELECTED, DEFAULT_PRESET, None)
    for name, setting in PRESETS.items():
        if doc.create_subsection(name):
            logging.info(f'Preset [{name}] is missing, restored.')
        for k, v in setting.items():
            repairs += _ensure(doc, k, v, name)

    _, selected = doc.search(KEY_SELECTED, str)
    if selected not in doc.sections:
        logging.warning(
            f'{KEY_SELECTED} points to unknown preset {selected!r}, '
            f'reset to {DEFAULT_PRESET!r}.')
        doc.set(KEY_SELECTED, DEFAULT_PRESET)
        repairs += 1
    return repairs


def read_preset(doc: IniDocument, name: str | None = None) -> PresetSetting:
    """Read a preset, the selected one by default.

    Values missing from the file fall back to the defaults.

    Raises:
        KeyError: no such preset section.
        ValueTypeMismatch: a value is mistyped, see `ensure_defaults()`.
    """
    if name is None:
        found, name = doc.search(KEY_SELECTED, str)
        if not found:
            name = DEFAULT_PRESET
    if not doc.subsection_exists(name):
        raise KeyError(name)
    defaults = PRESETS.get(name, PRESETS[DEFAULT_PRESET])
    ret = {}
    for k, default in defaults.items():
        found, v = doc.search(k, type(default), section=name)
        ret[k] = v if found else default
    return PresetSetting(**ret)


def load_presets(filename: str | PathLike[str],
                 encoding: str = 'utf-8') -> IniDocument:
    """Read the preset file, heal it and write it back if anything
    had to be repaired. A missing or malformed file is rebuilt."""
    handler = IniParser(filename, encoding)
    doc = handler.read() if exists(filename) else IniDocument()
    if (repairs := ensure_defaults(doc)) > 0:
        logging.info(f'{repairs} preset value(s) repaired, saving {handler}.')
        handler.write(doc)
    return doc
