from decimal import Decimal


class TestServiceRepository:
    def test_create_and_get(self, service_repo, sample_service):
        created = service_repo.create(sample_service(id=None, base_price=Decimal("45.50")))

        assert created.id is not None
        assert len(created.uuid) == 26
        assert created.name == "Alicatado"
        assert created.base_price == Decimal("45.50")
        assert created.unit == "m²"

        fetched = service_repo.get_by_id(created.id)
        assert fetched == created

    def test_get_missing(self, service_repo):
        assert service_repo.get_by_id(999) is None

    def test_list_all_ordered_by_name(self, service_repo, sample_service):
        service_repo.create(sample_service(id=None, name="Solado"))
        service_repo.create(sample_service(id=None, name="Alicatado"))

        names = [s.name for s in service_repo.list_all()]
        assert names == ["Alicatado", "Solado"]

    def test_get_many(self, service_repo, sample_service):
        a = service_repo.create(sample_service(id=None, name="A"))
        b = service_repo.create(sample_service(id=None, name="B"))

        result = service_repo.get_many([a.id, b.id, a.id, 999])
        assert set(result) == {a.id, b.id}
        assert result[b.id].name == "B"

    def test_get_many_empty(self, service_repo):
        assert service_repo.get_many([]) == {}

    def test_update(self, service_repo, saved_service):
        updated = service_repo.update(saved_service.model_copy(update={"base_price": Decimal("32"), "unit": "m"}))
        assert updated.base_price == Decimal("32")
        assert updated.unit == "m"

    def test_soft_delete(self, service_repo, saved_service):
        service_repo.delete(saved_service.id)

        assert service_repo.get_by_id(saved_service.id) is None
        assert service_repo.list_all() == []
        assert service_repo.get_many([saved_service.id]) == {}
