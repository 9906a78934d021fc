"""
Progressive Tax-Slab Calculations

Slab algorithm shared by the income tax and freelancer tax calculators.
The kernel only knows slabs; cess/surcharge is applied afterwards by the
caller so the same code serves any regime supplied as a slab table.

Slab boundaries are exclusive at ``min`` and inclusive at ``max``: an income
equal to a boundary is taxed entirely in the lower slab.
"""

import math
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Sequence, Tuple

from finclamp.exceptions import InvalidSlabTableError

INDIA_CESS_PERCENT = 4.0


@dataclass(frozen=True)
class TaxSlab:
    """One income band of a progressive schedule. ``max`` may be math.inf."""

    min: float
    max: float
    rate_percent: float


@dataclass(frozen=True)
class SlabContribution:
    """Tax attributable to a single slab."""

    slab: TaxSlab
    taxable_amount: float
    tax: float

    def as_dict(self) -> Dict:
        return {
            "min": self.slab.min,
            "max": None if math.isinf(self.slab.max) else self.slab.max,
            "rate_percent": self.slab.rate_percent,
            "taxable_amount": self.taxable_amount,
            "tax": self.tax,
        }


@dataclass(frozen=True)
class TaxResult:
    total_tax: float
    breakdown: Tuple[SlabContribution, ...]


@dataclass(frozen=True)
class IncomeTaxResult:
    """Income tax after deductions and cess."""

    gross_income: float
    taxable_income: float
    total_tax: float
    cess: float
    total_tax_with_cess: float
    net_income: float
    effective_tax_rate: float
    breakdown: Tuple[SlabContribution, ...]

    def as_dict(self) -> Dict:
        data = asdict(self)
        data["breakdown"] = [row.as_dict() for row in self.breakdown]
        return data


def validate_slabs(slabs: Sequence[TaxSlab]) -> Tuple[TaxSlab, ...]:
    """
    Check that a slab table is usable.

    The first slab must start at 0, slabs must be sorted and each slab's
    ``min`` must equal the previous slab's ``max``.

    Raises:
        InvalidSlabTableError: If the table is empty, unsorted or has gaps
    """
    if not slabs:
        raise InvalidSlabTableError("Slab table is empty")
    if slabs[0].min != 0:
        raise InvalidSlabTableError("First slab must start at 0")

    for previous, current in zip(slabs, slabs[1:]):
        if current.min != previous.max:
            raise InvalidSlabTableError(
                f"Slab starting at {current.min} does not continue from {previous.max}"
            )
    for slab in slabs:
        if slab.max <= slab.min:
            raise InvalidSlabTableError(f"Slab {slab.min}-{slab.max} is empty")

    return tuple(slabs)


def compute_progressive_tax(
    taxable_income: float, slabs: Sequence[TaxSlab]
) -> TaxResult:
    """
    Compute tax on an income across progressive slabs.

    Args:
        taxable_income: Income after deductions
        slabs: Contiguous slab table sorted by ``min``

    Returns:
        TaxResult with total and per-slab breakdown. Slabs that receive no
        income are left out of the breakdown.
    """
    if taxable_income <= 0:
        return TaxResult(total_tax=0.0, breakdown=())

    total_tax = 0.0
    breakdown: List[SlabContribution] = []

    for slab in slabs:
        if taxable_income > slab.min:
            amount = min(taxable_income, slab.max) - slab.min
            tax = amount * slab.rate_percent / 100
            total_tax += tax
            if amount > 0:
                breakdown.append(
                    SlabContribution(slab=slab, taxable_amount=amount, tax=tax)
                )

    return TaxResult(total_tax=total_tax, breakdown=tuple(breakdown))


def apply_cess(total_tax: float, cess_percent: float) -> float:
    """Flat cess/surcharge on top of slab tax."""
    return total_tax * cess_percent / 100


# Indian income tax slabs (per annum, rupees)
SLAB_TABLES: Dict[str, Dict[str, Tuple[TaxSlab, ...]]] = {
    "india": {
        "old": validate_slabs(
            [
                TaxSlab(0, 250000, 0),
                TaxSlab(250000, 500000, 5),
                TaxSlab(500000, 1000000, 20),
                TaxSlab(1000000, math.inf, 30),
            ]
        ),
        "new": validate_slabs(
            [
                TaxSlab(0, 300000, 0),
                TaxSlab(300000, 600000, 5),
                TaxSlab(600000, 900000, 10),
                TaxSlab(900000, 1200000, 15),
                TaxSlab(1200000, 1500000, 20),
                TaxSlab(1500000, math.inf, 30),
            ]
        ),
    }
}


def get_slabs(regime: str, country: str = "india") -> Tuple[TaxSlab, ...]:
    """Look up a slab table, raising KeyError for unknown regimes."""
    return SLAB_TABLES[country][regime]


def compute_income_tax(
    annual_income: float,
    regime: str = "new",
    deductions: float = 0.0,
    cess_percent: float = INDIA_CESS_PERCENT,
    country: str = "india",
) -> Optional[IncomeTaxResult]:
    """
    Compute income tax for a salaried or business income.

    Deductions reduce the taxable income (never below zero), slab tax is
    computed, then cess is added on top of the slab tax.

    Returns:
        IncomeTaxResult, or None when annual_income is not positive
    """
    if annual_income <= 0:
        return None

    taxable_income = max(0.0, annual_income - deductions)
    slab_result = compute_progressive_tax(taxable_income, get_slabs(regime, country))
    cess = apply_cess(slab_result.total_tax, cess_percent)
    total_with_cess = slab_result.total_tax + cess

    return IncomeTaxResult(
        gross_income=annual_income,
        taxable_income=taxable_income,
        total_tax=slab_result.total_tax,
        cess=cess,
        total_tax_with_cess=total_with_cess,
        net_income=annual_income - total_with_cess,
        effective_tax_rate=total_with_cess / annual_income * 100,
        breakdown=slab_result.breakdown,
    )


@dataclass(frozen=True)
class FreelancerTaxResult:
    """Tax position of a freelancer, including professional tax."""

    gross_income: float
    total_deductions: float
    taxable_income: float
    income_tax: float
    cess: float
    professional_tax: float
    total_tax: float
    net_income: float
    effective_tax_rate: float
    quarterly_advance_tax: float
    breakdown: Tuple[SlabContribution, ...]

    def as_dict(self) -> Dict:
        data = asdict(self)
        data["breakdown"] = [row.as_dict() for row in self.breakdown]
        return data


def compute_freelancer_tax(
    freelance_income: float,
    other_income: float = 0.0,
    business_expenses: float = 0.0,
    deductions: float = 0.0,
    professional_tax: float = 0.0,
    regime: str = "new",
    cess_percent: float = INDIA_CESS_PERCENT,
) -> Optional[FreelancerTaxResult]:
    """
    Compute tax for freelance income.

    Business expenses are netted off freelance income (not below zero) before
    other income is added. Professional tax is added after cess. Advance tax
    is paid in four equal instalments of the slab tax.

    Returns:
        FreelancerTaxResult, or None when there is no income at all
    """
    net_freelance = max(0.0, freelance_income - business_expenses)
    gross_income = net_freelance + other_income
    if gross_income <= 0:
        return None

    taxable_income = max(0.0, gross_income - deductions)
    slab_result = compute_progressive_tax(taxable_income, get_slabs(regime))
    cess = apply_cess(slab_result.total_tax, cess_percent)
    total_tax = slab_result.total_tax + cess + professional_tax

    return FreelancerTaxResult(
        gross_income=gross_income,
        total_deductions=deductions,
        taxable_income=taxable_income,
        income_tax=slab_result.total_tax,
        cess=cess,
        professional_tax=professional_tax,
        total_tax=total_tax,
        net_income=gross_income - total_tax,
        effective_tax_rate=total_tax / gross_income * 100,
        quarterly_advance_tax=slab_result.total_tax / 4,
        breakdown=slab_result.breakdown,
    )
