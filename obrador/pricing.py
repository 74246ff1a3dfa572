"""Budget and invoice pricing.

Pure functions over catalog data: no I/O, no clock and no module state, so
the same inputs always price to the same result. Every intermediate value is
an exact ``Decimal``; rounding to cents happens only when amounts are
formatted for a document, or when VAT is added for an invoice.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel

from obrador.constants import CENT, VAT_RATE
from obrador.models.budget import LineItem
from obrador.models.service import Service

ZERO = Decimal("0")
ONE = Decimal("1")


class DifficultyScope(str, Enum):
    PER_ITEM = "per_item"
    GLOBAL = "global"


class PricingConfig(BaseModel):
    free_radius_km: Decimal = Decimal("15")
    per_km_rate: Decimal = Decimal("3")
    # per_item: each line's own factor applies; global: line factors are ignored
    # and only the document-wide factor multiplies the subtotal.
    difficulty_scope: DifficultyScope = DifficultyScope.PER_ITEM

    @classmethod
    def from_settings(cls, settings) -> PricingConfig:
        return cls(
            free_radius_km=settings.pricing_free_radius_km,
            per_km_rate=settings.pricing_per_km_rate,
            difficulty_scope=DifficultyScope(settings.pricing_difficulty_scope),
        )


class PricingIssueKind(str, Enum):
    UNRESOLVED_SERVICE = "unresolved_service"
    INVALID_QUANTITY = "invalid_quantity"
    INVALID_DISTANCE = "invalid_distance"


class PricingIssue(BaseModel):
    kind: PricingIssueKind
    line_index: int | None = None
    service_id: int | None = None
    message: str = ""


class PricedItem(BaseModel):
    line_index: int
    service_id: int
    service_name: str
    unit: str
    unit_price: Decimal
    quantity: Decimal
    difficulty_factor: Decimal
    total: Decimal
    notes: str = ""
    included_items: list[str] = []

    def to_line_item(self, sort_order: int = 0) -> LineItem:
        return LineItem(
            service_id=self.service_id,
            quantity=self.quantity,
            difficulty_factor=self.difficulty_factor,
            notes=self.notes,
            included_items=self.included_items,
            service_name=self.service_name,
            unit=self.unit,
            unit_price=self.unit_price,
            total=self.total,
            sort_order=sort_order,
        )


class PricingResult(BaseModel):
    items: list[PricedItem] = []
    items_subtotal: Decimal = ZERO
    distance_km: Decimal = ZERO
    distance_fee: Decimal = ZERO
    subtotal: Decimal = ZERO
    global_difficulty_factor: Decimal = ONE
    difficulty_surcharge: Decimal = ZERO
    adjustment: Decimal = ZERO
    total: Decimal = ZERO
    submitted_count: int = 0
    issues: list[PricingIssue] = []

    @property
    def per_item_totals(self) -> list[Decimal]:
        return [item.total for item in self.items]

    @property
    def unresolved_service_ids(self) -> list[int]:
        return [
            issue.service_id
            for issue in self.issues
            if issue.kind == PricingIssueKind.UNRESOLVED_SERVICE and issue.service_id is not None
        ]

    @property
    def rejected(self) -> bool:
        return any(issue.kind == PricingIssueKind.INVALID_DISTANCE for issue in self.issues)

    @property
    def is_complete(self) -> bool:
        """True when every submitted line was priced."""
        return not self.issues and len(self.items) == self.submitted_count


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_item_total(base_price: Decimal, quantity: Decimal, difficulty_factor: Decimal = ONE) -> Decimal:
    return base_price * quantity * difficulty_factor


def compute_distance_fee(distance_km: Decimal, config: PricingConfig | None = None) -> Decimal:
    """Travel surcharge, charged once per document for the km beyond the free radius."""
    config = config or PricingConfig()
    excess = distance_km - config.free_radius_km
    if excess <= ZERO:
        return ZERO
    return excess * config.per_km_rate


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_vat(subtotal: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(tax, grand_total)`` at the fixed VAT rate.

    The base and the tax are rounded to cents and the grand total is their
    exact sum, so the printed invoice rows always add up.
    """
    base = to_cents(subtotal)
    tax = to_cents(base * VAT_RATE)
    return tax, base + tax


def price_budget(
    items: Sequence[LineItem],
    catalog: Mapping[int, Service],
    distance_km: Decimal = ZERO,
    global_difficulty_factor: Decimal | None = None,
    manual_adjustment: Decimal | None = None,
    config: PricingConfig | None = None,
) -> PricingResult:
    """Price a list of line items against the service catalog.

    Problems with the input never raise. A line whose service is missing
    from ``catalog`` or whose quantity is not positive is left out of the
    total and reported in ``issues``. A negative distance rejects the whole
    request: the result carries no items and a zero total.

    ``total = (sum(item totals) + distance fee) * global factor + adjustment``
    """
    config = config or PricingConfig()
    distance_km = _as_decimal(distance_km)
    factor = ONE if global_difficulty_factor is None else _as_decimal(global_difficulty_factor)
    adjustment = ZERO if manual_adjustment is None else _as_decimal(manual_adjustment)

    if distance_km < ZERO:
        return PricingResult(
            distance_km=distance_km,
            global_difficulty_factor=factor,
            submitted_count=len(items),
            issues=[
                PricingIssue(
                    kind=PricingIssueKind.INVALID_DISTANCE,
                    message=f"distance must not be negative (got {distance_km})",
                )
            ],
        )

    priced: list[PricedItem] = []
    issues: list[PricingIssue] = []

    for index, item in enumerate(items):
        if item.quantity <= ZERO:
            issues.append(
                PricingIssue(
                    kind=PricingIssueKind.INVALID_QUANTITY,
                    line_index=index,
                    service_id=item.service_id,
                    message=f"quantity must be positive (got {item.quantity})",
                )
            )
            continue

        service = catalog.get(item.service_id)
        if service is None:
            issues.append(
                PricingIssue(
                    kind=PricingIssueKind.UNRESOLVED_SERVICE,
                    line_index=index,
                    service_id=item.service_id,
                    message=f"service {item.service_id} not found in catalog",
                )
            )
            continue

        line_factor = item.difficulty_factor if config.difficulty_scope == DifficultyScope.PER_ITEM else ONE
        priced.append(
            PricedItem(
                line_index=index,
                service_id=item.service_id,
                service_name=service.name,
                unit=service.unit,
                unit_price=service.base_price,
                quantity=item.quantity,
                difficulty_factor=line_factor,
                total=compute_item_total(service.base_price, item.quantity, line_factor),
                notes=item.notes,
                included_items=[inc for inc in item.included_items if inc.strip()],
            )
        )

    items_subtotal = sum((p.total for p in priced), ZERO)
    distance_fee = compute_distance_fee(distance_km, config)
    subtotal = items_subtotal + distance_fee
    scaled = subtotal * factor

    return PricingResult(
        items=priced,
        items_subtotal=items_subtotal,
        distance_km=distance_km,
        distance_fee=distance_fee,
        subtotal=subtotal,
        global_difficulty_factor=factor,
        difficulty_surcharge=scaled - subtotal,
        adjustment=adjustment,
        total=scaled + adjustment,
        submitted_count=len(items),
        issues=issues,
    )
