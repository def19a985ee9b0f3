# Ensure repository root is on sys.path for imports like `from emotion_manifold.engine import ...`
import os
import sys

import pytest

_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from emotion_manifold.field.emotion import EmotionalParameters  # noqa: E402


@pytest.fixture
def default_params() -> EmotionalParameters:
    return EmotionalParameters.default()


@pytest.fixture
def flat_params() -> EmotionalParameters:
    # Zero attachment: every emotion vanishes and the surface is the plane z = 0
    return EmotionalParameters(EP=0.0, P=0.0, V=0.0, SC=1.0, Acc=0.5, W_p=0.5, T=0.0)


@pytest.fixture
def bending_params() -> EmotionalParameters:
    return EmotionalParameters(EP=0.2, P=0.8, V=1.0, SC=1.0, Acc=1.0, W_p=0.9, T=0.0)
