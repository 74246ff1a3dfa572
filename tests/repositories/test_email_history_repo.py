from obrador.models.email_history import DocumentType, EmailHistoryEntry, EmailType


class TestEmailHistoryRepository:
    def test_create_and_list(self, history_repo):
        proposal = history_repo.create(
            EmailHistoryEntry(
                document_type=DocumentType.BUDGET,
                document_id=1,
                type=EmailType.PROPOSAL,
                subject="Presupuesto 1/025",
                content="Estimado/a Ana,",
            )
        )
        history_repo.create(
            EmailHistoryEntry(
                document_type=DocumentType.BUDGET,
                document_id=1,
                type=EmailType.RESPONSE,
                subject="Re: Presupuesto 1/025",
                content="Gracias por su mensaje.",
            )
        )
        history_repo.create(
            EmailHistoryEntry(
                document_type=DocumentType.INVOICE,
                document_id=1,
                type=EmailType.PROPOSAL,
                content="Factura",
            )
        )

        assert proposal.id is not None
        assert proposal.sent_at is not None

        entries = history_repo.list_by_document(DocumentType.BUDGET, 1)
        assert [e.type for e in entries] == [EmailType.PROPOSAL, EmailType.RESPONSE]
        assert entries[1].subject == "Re: Presupuesto 1/025"
        assert len(history_repo.list_by_document(DocumentType.INVOICE, 1)) == 1
        assert history_repo.list_by_document(DocumentType.BUDGET, 2) == []
