import logging

import matplotlib

matplotlib.use("Agg")

import pytest

from musicvenn.regions import NamedCollection


@pytest.fixture
def scenario_collections():
    return [
        NamedCollection("Personal", ("A", "B", "C")),
        NamedCollection("Country", ("B", "C", "D")),
        NamedCollection("World", ("C", "D", "E")),
    ]


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("musicvenn")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
