from decimal import Decimal
from unittest.mock import MagicMock

from obrador.cli.service_menu import service_management_menu
from obrador.models.service import Service


def _catalog(services=None) -> MagicMock:
    catalog = MagicMock()
    catalog.list_services.return_value = services or []
    return catalog


class TestServiceManagementMenu:
    def test_back(self, mock_q):
        catalog = _catalog()
        mock_q.select.return_value.ask.return_value = "Voltar"

        service_management_menu(catalog)
        catalog.create_service.assert_not_called()

    def test_add_service(self, mock_q):
        catalog = _catalog()
        catalog.create_service.return_value = Service(id=2, name="Pintura", base_price=Decimal("12.5"), unit="m²")
        mock_q.select.return_value.ask.side_effect = ["Adicionar Serviço", "m²", "Voltar"]
        mock_q.text.return_value.ask.side_effect = ["Pintura", "12,50"]

        service_management_menu(catalog)

        catalog.create_service.assert_called_once_with("Pintura", Decimal("12.50"), "m²")

    def test_add_service_cancelled(self, mock_q):
        catalog = _catalog()
        mock_q.select.return_value.ask.side_effect = ["Adicionar Serviço", "Voltar"]
        mock_q.text.return_value.ask.return_value = ""

        service_management_menu(catalog)
        catalog.create_service.assert_not_called()

    def test_add_service_validation_error(self, mock_q):
        catalog = _catalog()
        catalog.create_service.side_effect = ValueError("Service unit is required")
        mock_q.select.return_value.ask.side_effect = ["Adicionar Serviço", "m²", "Voltar"]
        mock_q.text.return_value.ask.side_effect = ["Pintura", "10"]

        service_management_menu(catalog)
        catalog.create_service.assert_called_once()

    def test_edit_service(self, mock_q):
        existing = Service(id=1, name="Alicatado", base_price=Decimal("30"), unit="m²")
        catalog = _catalog([existing])
        catalog.update_service.side_effect = lambda service: service
        mock_q.select.return_value.ask.side_effect = ["Editar Serviço", "1 - Alicatado", "ml", "Voltar"]
        mock_q.text.return_value.ask.side_effect = ["Alicatado fino", "35"]

        service_management_menu(catalog)

        updated = catalog.update_service.call_args[0][0]
        assert updated.id == 1
        assert updated.name == "Alicatado fino"
        assert updated.base_price == Decimal("35")
        assert updated.unit == "ml"

    def test_delete_service(self, mock_q):
        catalog = _catalog([Service(id=1, name="Alicatado", base_price=Decimal("30"), unit="m²")])
        mock_q.select.return_value.ask.side_effect = ["Excluir Serviço", "1 - Alicatado", "Voltar"]
        mock_q.confirm.return_value.ask.return_value = True

        service_management_menu(catalog)
        catalog.delete_service.assert_called_once_with(1)

    def test_delete_not_confirmed(self, mock_q):
        catalog = _catalog([Service(id=1, name="Alicatado", base_price=Decimal("30"), unit="m²")])
        mock_q.select.return_value.ask.side_effect = ["Excluir Serviço", "1 - Alicatado", "Voltar"]
        mock_q.confirm.return_value.ask.return_value = False

        service_management_menu(catalog)
        catalog.delete_service.assert_not_called()
