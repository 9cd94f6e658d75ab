"""Tests for the sourcing engine."""

import pytest

from sourcewise.core.errors import CollaboratorUnavailable, NotFound, ValidationError
from sourcewise.data.factory import Collaborators
from sourcewise.data.sources.mock import InMemorySupplierDirectory
from sourcewise.engine import SourcingEngine, create_engine
from sourcewise.models import Settings


class FailingDirectory(InMemorySupplierDirectory):
    """Directory whose per-supplier lookups are unavailable."""

    async def get_supplier(self, supplier_id):
        raise CollaboratorUnavailable("supplier_directory", "connection refused")

    async def get_supplier_history(self, supplier_id):
        raise CollaboratorUnavailable("supplier_directory", "connection refused")


class TestFindMatches:
    """Tests for SourcingEngine.find_matches."""

    @pytest.mark.asyncio
    async def test_ranks_directory_catalog(self, engine, requirement, as_of):
        report = await engine.find_matches(requirement, as_of=as_of)
        assert [m.supplier_id for m in report.matches] == ["SUP-100", "SUP-200"]
        assert report.matches[0].score == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_ranks_given_suppliers(self, engine, requirement, supplier_factory, as_of):
        report = await engine.find_matches(
            requirement, [supplier_factory(id="SUP-X")], as_of=as_of
        )
        assert [m.supplier_id for m in report.matches] == ["SUP-X"]

    @pytest.mark.asyncio
    async def test_empty_supplier_list(self, engine, requirement):
        report = await engine.find_matches(requirement, [])
        assert report.matches == []

    @pytest.mark.asyncio
    async def test_invalid_requirement_raises(self, engine, requirement_record):
        del requirement_record["category"]
        with pytest.raises(ValidationError) as exc_info:
            await engine.find_matches(requirement_record)
        assert exc_info.value.field == "category"


class TestAnalyzeComplexRFQ:
    """Tests for SourcingEngine.analyze_complex_rfq."""

    @pytest.mark.asyncio
    async def test_analysis_covers_lines_and_suppliers(self, engine, complex_rfq):
        analysis = await engine.analyze_complex_rfq(complex_rfq)

        assert analysis.rfq_id == "CRFQ-1"
        assert [a.product for a in analysis.line_analyses] == ["HR steel coils", "Steel fasteners"]
        assert [r.supplier_id for r in analysis.supplier_risks] == ["SUP-100", "SUP-200"]
        assert analysis.market_price is not None
        assert 0.0 <= analysis.success_probability <= 1.0

    @pytest.mark.asyncio
    async def test_missing_history_is_flagged(self, engine, complex_rfq):
        analysis = await engine.analyze_complex_rfq(complex_rfq)
        flagged = [n for n in analysis.diagnostics if n.subject == "SUP-200"]
        assert flagged
        assert all(n.fallback for n in flagged)

    @pytest.mark.asyncio
    async def test_accepts_raw_record(self, engine):
        analysis = await engine.analyze_complex_rfq(
            {
                "id": "CRFQ-RAW",
                "products": [{"name": "Copper wire", "quantity": 10, "budget": 2_000_000}],
                "suppliers": ["SUP-100"],
                "priority": "urgent",
            }
        )
        assert analysis.negotiation_suggestions[:2] == [
            "Consider bulk discount of 5-10% for large order",
            "Offer premium for faster delivery",
        ]

    @pytest.mark.asyncio
    async def test_rfq_without_products_rejected(self, engine):
        with pytest.raises(ValidationError) as exc_info:
            await engine.analyze_complex_rfq({"id": "CRFQ-EMPTY", "products": []})
        assert exc_info.value.field == "products"

    @pytest.mark.asyncio
    async def test_unknown_supplier_gets_default_risk(self, engine, complex_rfq):
        rfq = complex_rfq.model_copy(update={"suppliers": ["SUP-404"]})
        analysis = await engine.analyze_complex_rfq(rfq)
        assert analysis.supplier_risks[0].risk_score == 0.5

    @pytest.mark.asyncio
    async def test_unavailable_directory_degrades(self, collaborators, complex_rfq):
        failing = Collaborators(
            directory=FailingDirectory(),
            market_data=collaborators.market_data,
            rfq_store=collaborators.rfq_store,
        )
        analysis = await SourcingEngine(failing).analyze_complex_rfq(complex_rfq)

        assert all(r.risk_score == 0.5 for r in analysis.supplier_risks)
        reasons = {n.reason for n in analysis.diagnostics}
        assert "connection refused" in reasons

    @pytest.mark.asyncio
    async def test_raw_history_errors_degrade(self, collaborators, complex_rfq):
        class BrokenHistory(InMemorySupplierDirectory):
            async def get_supplier_history(self, supplier_id):
                raise ConnectionError("socket closed")

        broken = Collaborators(
            directory=BrokenHistory(suppliers=await collaborators.directory.list_suppliers()),
            market_data=collaborators.market_data,
            rfq_store=collaborators.rfq_store,
        )
        analysis = await SourcingEngine(broken).analyze_complex_rfq(complex_rfq)

        assert len(analysis.supplier_risks) == 2
        assert "ConnectionError: socket closed" in {n.reason for n in analysis.diagnostics}


class TestNegotiationReport:
    """Tests for SourcingEngine.generate_negotiation_report."""

    @pytest.mark.asyncio
    async def test_report_for_stored_rfq(self, engine):
        report = await engine.generate_negotiation_report("CRFQ-1")
        assert report.rfq_id == "CRFQ-1"
        assert report.recommendations == report.analysis.negotiation_suggestions
        assert report.success_probability == report.analysis.success_probability
        assert report.next_steps

    @pytest.mark.asyncio
    async def test_unknown_rfq_raises_not_found(self, engine):
        with pytest.raises(NotFound) as exc_info:
            await engine.generate_negotiation_report("CRFQ-404")
        assert exc_info.value.identifier == "CRFQ-404"


class TestCreateEngine:
    """Tests for the engine factory."""

    def test_builds_mock_engine(self):
        engine = create_engine(Settings(data_source="mock", collaborator_timeout_seconds=2.5))
        assert engine.guard.timeout_seconds == 2.5
        assert engine.policy.matching.weights.category_match == 25

    def test_unknown_data_source(self):
        with pytest.raises(ValueError):
            create_engine(Settings(data_source="oracle"))
