"""In-memory and simulated collaborators for development and testing."""
import random
from datetime import date, datetime, timedelta
from typing import Any

from sourcewise.data.interfaces import (
    BaseMarketDataService,
    BaseRFQStore,
    BaseSupplierDirectory,
    RFQResponseRecord,
    SupplierFilter,
    SupplierHistory,
)
from sourcewise.models import (
    CompetitorPrices,
    ComplexRFQ,
    DemandForecast,
    DemandTrend,
    LineItem,
    PriceBand,
    PriceRange,
    Priority,
    RFQRequirement,
    Supplier,
    Urgency,
    VerificationLevel,
)


def sample_suppliers() -> list[Supplier]:
    """A small catalog of Indian industrial suppliers."""
    return [
        Supplier(
            id="SUP-001",
            name="Tata Industrial Steel Works",
            categories=["Steel", "Industrial Steel Products", "Metal Fabrication"],
            rating=4.7,
            location={"city": "Jamshedpur", "state": "Jharkhand", "country": "India"},
            price_range=PriceRange(min=200_000, max=5_000_000),
            compliance_score=95,
            on_time_delivery_rate=96,
            quality_rating=4.8,
            financial_rating=4.5,
            verification_level=VerificationLevel.PREMIUM,
            years_of_experience=40,
            capacity=2_000_000,
            lead_time_days=21,
        ),
        Supplier(
            id="SUP-002",
            name="Pune Precision Castings",
            categories=["Castings", "Steel"],
            rating=4.2,
            location={"city": "Pune", "state": "Maharashtra", "country": "India"},
            price_range=PriceRange(min=50_000, max=800_000),
            compliance_score=88,
            on_time_delivery_rate=91,
            quality_rating=4.1,
            financial_rating=3.8,
            verification_level=VerificationLevel.VERIFIED,
            years_of_experience=15,
            capacity=300_000,
            lead_time_days=14,
        ),
        Supplier(
            id="SUP-003",
            name="Mumbai Polymers & Packaging",
            categories=["Packaging", "Plastics"],
            rating=3.9,
            location={"city": "Mumbai", "state": "Maharashtra", "country": "India"},
            price_range=PriceRange(min=10_000, max=500_000),
            compliance_score=82,
            on_time_delivery_rate=88,
            quality_rating=3.8,
            financial_rating=3.5,
            verification_level=VerificationLevel.VERIFIED,
            years_of_experience=9,
            capacity=150_000,
            lead_time_days=10,
        ),
        Supplier(
            id="SUP-004",
            name="Chennai Electronics Components",
            categories=["Electronics", "PCB Assembly"],
            rating=4.5,
            location={"city": "Chennai", "state": "Tamil Nadu", "country": "India"},
            price_range=PriceRange(min=100_000, max=2_500_000),
            compliance_score=92,
            on_time_delivery_rate=94,
            quality_rating=4.6,
            financial_rating=4.2,
            verification_level=VerificationLevel.PREMIUM,
            years_of_experience=22,
            capacity=900_000,
            lead_time_days=30,
        ),
        Supplier(
            id="SUP-005",
            name="Surat Textile Mills",
            categories=["Textiles", "Cotton Fabric"],
            rating=4.0,
            location={"city": "Surat", "state": "Gujarat", "country": "India"},
            price_range=PriceRange(min=25_000, max=1_000_000),
            compliance_score=76,
            on_time_delivery_rate=82,
            quality_rating=3.9,
            financial_rating=3.2,
            verification_level=VerificationLevel.BASIC,
            years_of_experience=30,
            capacity=400_000,
            lead_time_days=25,
        ),
        Supplier(
            id="SUP-006",
            name="Ludhiana Steel Fasteners",
            categories=["Fasteners", "Steel Hardware"],
            rating=3.6,
            location={"city": "Ludhiana", "state": "Punjab", "country": "India"},
            price_range=PriceRange(min=5_000, max=300_000),
            compliance_score=70,
            on_time_delivery_rate=72,
            quality_rating=3.4,
            financial_rating=2.8,
            verification_level=VerificationLevel.BASIC,
            years_of_experience=6,
            capacity=60_000,
            lead_time_days=12,
        ),
        Supplier(
            id="SUP-007",
            name="Vapi Specialty Chemicals",
            categories=["Chemicals", "Solvents"],
            rating=4.3,
            location={"city": "Vapi", "state": "Gujarat", "country": "India"},
            price_range=PriceRange(min=40_000, max=1_500_000),
            compliance_score=90,
            on_time_delivery_rate=93,
            quality_rating=4.4,
            financial_rating=4.0,
            verification_level=VerificationLevel.VERIFIED,
            years_of_experience=18,
            capacity=500_000,
            lead_time_days=18,
        ),
    ]


def sample_histories(now: datetime | None = None) -> dict[str, SupplierHistory]:
    """Response/transaction history for part of the sample catalog."""
    now = now or datetime.now()

    def responses(count: int, hours: float) -> list[RFQResponseRecord]:
        return [
            RFQResponseRecord(
                rfq_id=f"RFQ-H{i:03d}",
                created_at=now - timedelta(days=30 + i),
                responded_at=now - timedelta(days=30 + i) + timedelta(hours=hours),
            )
            for i in range(count)
        ]

    return {
        "SUP-001": SupplierHistory(
            supplier_id="SUP-001", responses=responses(14, 6), transaction_count=42, verified=True
        ),
        "SUP-002": SupplierHistory(
            supplier_id="SUP-002", responses=responses(6, 18), transaction_count=9, verified=True
        ),
        "SUP-004": SupplierHistory(
            supplier_id="SUP-004", responses=responses(8, 12), transaction_count=15, verified=True
        ),
        "SUP-006": SupplierHistory(supplier_id="SUP-006"),
    }


class InMemorySupplierDirectory(BaseSupplierDirectory):
    """Supplier directory backed by in-memory records."""

    def __init__(
        self,
        suppliers: list[Supplier | dict[str, Any]] | None = None,
        histories: dict[str, SupplierHistory] | None = None,
    ):
        self._suppliers = list(sample_suppliers() if suppliers is None else suppliers)
        self._histories = sample_histories() if histories is None else dict(histories)

    async def list_suppliers(
        self, supplier_filter: SupplierFilter | None = None
    ) -> list[Supplier | dict[str, Any]]:
        records = list(self._suppliers)
        if supplier_filter is None:
            return records

        def keep(record: Supplier | dict[str, Any]) -> bool:
            # Raw records pass through untouched; the ranker validates them.
            if not isinstance(record, Supplier):
                return True
            if supplier_filter.category:
                wanted = supplier_filter.category.lower()
                if not any(wanted in c.lower() for c in record.categories):
                    return False
            if supplier_filter.country:
                country = record.location.country if record.location else None
                if not country or country.lower() != supplier_filter.country.lower():
                    return False
            if supplier_filter.min_rating is not None and record.rating < supplier_filter.min_rating:
                return False
            return True

        records = [r for r in records if keep(r)]
        if supplier_filter.limit is not None:
            records = records[: supplier_filter.limit]
        return records

    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        for record in self._suppliers:
            if isinstance(record, Supplier) and record.id == supplier_id:
                return record
        return None

    async def get_supplier_history(self, supplier_id: str) -> SupplierHistory | None:
        return self._histories.get(supplier_id)


class MockMarketDataService(BaseMarketDataService):
    """
    Simulated market data.

    Values are pseudo-random but seeded by product name, so the same product
    always yields the same band, forecast and competitor quotes.
    """

    def __init__(self, base_price: float = 45_000.0, seed: str = "sourcewise"):
        self.base_price = base_price
        self.seed = seed

    def _rng(self, product: str, aspect: str) -> random.Random:
        return random.Random(f"{self.seed}:{aspect}:{product.lower()}")

    async def get_price_band(self, product: str, specs: dict[str, Any]) -> PriceBand | None:
        volatility = self._rng(product, "band").random() * 0.2
        spec_multiplier = len(specs) * 0.1
        return PriceBand(
            min=round(self.base_price * (1 - volatility), 2),
            max=round(self.base_price * (1 + volatility), 2),
            avg=round(self.base_price * (1 + spec_multiplier), 2),
        )

    async def get_demand_forecast(self, product: str) -> DemandForecast | None:
        rng = self._rng(product, "demand")
        trend = rng.choice([DemandTrend.UP, DemandTrend.DOWN, DemandTrend.STABLE])
        return DemandForecast(trend=trend, factor=round(0.8 + rng.random() * 0.4, 3))

    async def get_competitor_prices(self, product: str) -> CompetitorPrices | None:
        offsets = [0.95, 1.05, 0.98, 1.02]
        return CompetitorPrices(
            prices=[round(self.base_price * o, 2) for o in offsets],
            sources=["Supplier A", "Supplier B", "Supplier C", "Supplier D"],
        )


class InMemoryRFQStore(BaseRFQStore):
    """RFQ store backed by in-memory records."""

    def __init__(
        self,
        requirements: list[RFQRequirement] | None = None,
        complex_rfqs: list[ComplexRFQ] | None = None,
    ):
        if requirements is None and complex_rfqs is None:
            requirements, complex_rfqs = sample_rfqs()
        self._requirements = {r.id: r for r in requirements or []}
        self._complex = {r.id: r for r in complex_rfqs or []}

    async def get_requirement(self, rfq_id: str) -> RFQRequirement | None:
        return self._requirements.get(rfq_id)

    async def get_complex_rfq(self, rfq_id: str) -> ComplexRFQ | None:
        return self._complex.get(rfq_id)


def sample_rfqs(today: date | None = None) -> tuple[list[RFQRequirement], list[ComplexRFQ]]:
    """Sample single-item and multi-item RFQs with deadlines relative to today."""
    today = today or date.today()
    requirements = [
        RFQRequirement(
            id="RFQ-1001",
            title="Structural steel beams",
            description="IS 2062 grade E250 beams for warehouse construction",
            category="Steel",
            quantity="120 tonnes",
            target_price="₹12,00,000",
            deadline=today + timedelta(days=30),
            location={"city": "Pune", "state": "Maharashtra", "country": "India"},
            urgency=Urgency.MEDIUM,
        ),
    ]
    complex_rfqs = [
        ComplexRFQ(
            id="CRFQ-2001",
            products=[
                LineItem(
                    name="HR steel coils",
                    quantity=200,
                    specifications={"grade": "IS 2062", "thickness_mm": 6},
                    budget=900_000,
                ),
                LineItem(
                    name="Steel fasteners",
                    quantity=50_000,
                    specifications={"size": "M12"},
                    budget=250_000,
                ),
            ],
            suppliers=["SUP-001", "SUP-002", "SUP-006"],
            timeline=(today + timedelta(days=45)).isoformat(),
            location={"city": "Pune", "state": "Maharashtra", "country": "India"},
            priority=Priority.HIGH,
        ),
    ]
    return requirements, complex_rfqs
