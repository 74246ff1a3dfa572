from unittest.mock import MagicMock, patch

import pytest

MENU_MODULES = [
    "obrador.cli.prompts",
    "obrador.cli.service_menu",
    "obrador.cli.budget_menu",
    "obrador.cli.invoice_menu",
    "obrador.cli.objection_menu",
]


@pytest.fixture()
def mock_q():
    """One questionary mock shared by the menus and the prompt helpers they call."""
    mock = MagicMock()
    patchers = [patch(f"{module}.questionary", mock) for module in MENU_MODULES]
    for p in patchers:
        p.start()
    yield mock
    for p in patchers:
        p.stop()
