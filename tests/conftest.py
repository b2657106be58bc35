import pytest
from PySide6.QtCore import QCoreApplication

from freedeck_config.core.profile import ProfileModel


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def profile():
    """3x2 grid with three pages"""
    p = ProfileModel(3, 2)
    p.add_page(-1)
    p.add_page(0)
    p.add_page(1)
    return p
