"""Fixtures describing the specforge package layers for pytestarch."""

import pytest
from pytestarch import (
    EvaluableArchitecture,
    LayeredArchitecture,
    get_evaluable_architecture,
)

from .layers import LAYERS, PACKAGE_DIR, SRC_DIR


@pytest.fixture(scope="session")
def specforge_modules() -> EvaluableArchitecture:
    return get_evaluable_architecture(str(SRC_DIR), str(PACKAGE_DIR))


@pytest.fixture(scope="session")
def specforge_layers() -> LayeredArchitecture:
    # Module names are reported relative to SRC_DIR's parent, hence "src."
    architecture = LayeredArchitecture()
    for name in LAYERS:
        architecture = architecture.layer(name).containing_modules(
            [f"src.specforge.{name}"]
        )
    return architecture
