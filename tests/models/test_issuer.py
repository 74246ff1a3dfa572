from obrador.models.issuer import Issuer
from obrador.settings import Settings


class TestIssuer:
    def test_from_settings(self):
        s = Settings(
            _env_file=None,
            business_name="Reformas Pérez",
            business_tax_id="12345678Z",
            payment_iban="ES00 0000",
        )
        issuer = Issuer.from_settings(s)
        assert issuer.name == "Reformas Pérez"
        assert issuer.tax_id == "12345678Z"
        assert issuer.payment_iban == "ES00 0000"
        assert issuer.payment_method == "Transferencia bancaria"
