"""Shared fixtures for the pyechocap tests."""
import sys
from pathlib import Path

import pytest

# Allow running the suite from a plain checkout (src layout).
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from pyechocap.ini import parse  # noqa: E402


# Deliberately messy: odd spacing, both comment markers, escapes,
# blank lines and a trailing newline.
SAMPLE = (
    '# presets\n'
    'selectedPreset   =   high    ; current one\n'
    '\n'
    '[low]   ; small files\n'
    'imageQuality=50\n'
    'enableRescaling = True\n'
    'rescalingScale = 0.5\n'
    '\n'
    '[high]\n'
    'pixelFormat = Format48bppRgb\n'
    r'title = "My \"best\" preset"' '\n'
    r'path = C:\\captures\;backup' '\n'
)


@pytest.fixture
def sample_text():
    return SAMPLE


@pytest.fixture
def sample_doc():
    return parse(SAMPLE)
