"""
Ratio and Split Arithmetic

Small closed-form calculators: simple interest, CAGR/ROI, tip and bill
splitting, stacked discounts, gratuity, inflation and averaging the cost
of a stock bought in several lots.
"""

from dataclasses import dataclass, asdict, field
from typing import Dict, List, Optional, Sequence, Tuple

GRATUITY_MIN_YEARS = 5
GRATUITY_CAP_COVERED = 2000000
GRATUITY_TAX_FREE_NOT_COVERED = 1000000
BREAKDOWN_MAX_YEARS = 20


@dataclass(frozen=True)
class SimpleInterestResult:
    principal: float
    simple_interest: float
    amount: float
    monthly_interest: float
    daily_interest: float
    yearly: List[Dict] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class GrowthRateResult:
    cagr_percent: float
    total_return: float
    total_return_percent: float

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class TipResult:
    tip_amount: float
    total_amount: float
    per_person_bill: float
    per_person_tip: float
    per_person_total: float

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class BillSplitResult:
    subtotal: float
    tip_amount: float
    tip_percent: float
    total_with_tip: float
    per_person_amount: float
    custom_total: float
    remaining_amount: float
    remaining_people: int
    per_person_remaining: float

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class DiscountResult:
    discount_amount: float
    additional_discount_amount: float
    total_discount: float
    price_after_discount: float
    tax_amount: float
    final_price: float
    total_savings: float
    savings_percent: float

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class GratuityResult:
    gratuity_amount: float
    total_service_years: float
    is_eligible: bool
    tax_free_amount: float
    taxable_amount: float

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class InflationResult:
    future_value: float
    total_inflation: float
    real_value: float
    purchasing_power_loss_percent: float
    average_annual_increase: float
    yearly: List[Dict] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return asdict(self)


def compute_simple_interest(
    principal: float, rate_percent: float, years: float
) -> Optional[SimpleInterestResult]:
    """SI = P * R * T / 100, with up to 20 yearly rows."""
    if principal <= 0 or rate_percent <= 0 or years <= 0:
        return None

    interest = principal * rate_percent * years / 100
    yearly = []
    for year in range(1, int(min(years, BREAKDOWN_MAX_YEARS)) + 1):
        year_interest = principal * rate_percent * year / 100
        yearly.append(
            {
                "year": year,
                "interest": round(year_interest),
                "amount": round(principal + year_interest),
            }
        )

    return SimpleInterestResult(
        principal=principal,
        simple_interest=interest,
        amount=principal + interest,
        monthly_interest=interest / (years * 12),
        daily_interest=interest / (years * 365),
        yearly=yearly,
    )


def compute_cagr(
    beginning_value: float, ending_value: float, years: float
) -> Optional[GrowthRateResult]:
    """CAGR = (ending / beginning)^(1/years) - 1, as a percentage."""
    if beginning_value <= 0 or ending_value <= 0 or years <= 0:
        return None

    cagr = (ending_value / beginning_value) ** (1 / years) - 1
    total_return = ending_value - beginning_value
    return GrowthRateResult(
        cagr_percent=cagr * 100,
        total_return=total_return,
        total_return_percent=total_return / beginning_value * 100,
    )


def compute_roi(beginning_value: float, ending_value: float) -> Optional[Dict]:
    """Return on investment as net profit over cost."""
    if beginning_value <= 0:
        return None
    net_profit = ending_value - beginning_value
    return {"roi_percent": net_profit / beginning_value * 100, "net_profit": net_profit}


def compute_tip(
    bill_amount: float, tip_percent: float, people: int = 1
) -> Optional[TipResult]:
    if bill_amount <= 0:
        return None
    people = people if people > 0 else 1

    tip = bill_amount * tip_percent / 100
    total = bill_amount + tip
    return TipResult(
        tip_amount=tip,
        total_amount=total,
        per_person_bill=bill_amount / people,
        per_person_tip=tip / people,
        per_person_total=total / people,
    )


def compute_bill_split(
    total_bill: float,
    people: int,
    tip_percent: float = 0.0,
    tip_amount: Optional[float] = None,
    custom_shares: Sequence[float] = (),
) -> Optional[BillSplitResult]:
    """
    Split a bill with tip between people.

    Either ``tip_percent`` or a fixed ``tip_amount`` sets the tip. People in
    ``custom_shares`` pay their fixed amount; everyone else splits what is left.
    """
    if total_bill <= 0:
        return None
    people = people if people > 0 else 1

    if tip_amount is not None:
        tip = tip_amount
        tip_percent = tip_amount / total_bill * 100
    else:
        tip = total_bill * tip_percent / 100

    total_with_tip = total_bill + tip
    custom_total = sum(custom_shares)
    remaining = total_with_tip - custom_total
    remaining_people = max(0, people - len(custom_shares))

    return BillSplitResult(
        subtotal=total_bill,
        tip_amount=tip,
        tip_percent=tip_percent,
        total_with_tip=total_with_tip,
        per_person_amount=total_with_tip / people,
        custom_total=custom_total,
        remaining_amount=remaining,
        remaining_people=remaining_people,
        per_person_remaining=remaining / remaining_people if remaining_people else 0.0,
    )


def compute_discount(
    original_price: float,
    discount_percent: float,
    additional_percent: float = 0.0,
    tax_percent: float = 0.0,
) -> Optional[DiscountResult]:
    """
    Stacked discounts: the additional discount applies to the already
    discounted price, and tax applies to the final discounted price.
    """
    if original_price <= 0:
        return None

    discount = original_price * discount_percent / 100
    after_first = original_price - discount
    additional = after_first * additional_percent / 100
    after_all = after_first - additional
    tax = after_all * tax_percent / 100
    savings = original_price - after_all

    return DiscountResult(
        discount_amount=discount,
        additional_discount_amount=additional,
        total_discount=discount + additional,
        price_after_discount=after_all,
        tax_amount=tax,
        final_price=after_all + tax,
        total_savings=savings,
        savings_percent=savings / original_price * 100,
    )


def compute_gratuity(
    last_drawn_salary: float,
    years_of_service: float,
    months_of_service: float = 0.0,
    covered: bool = True,
) -> Optional[GratuityResult]:
    """
    Gratuity under the Payment of Gratuity Act.

    Covered employers pay 15/26 of monthly salary per completed year, capped
    at 20 lakh; others pay 15/30. Under five years of service is ineligible.
    """
    if last_drawn_salary <= 0 or (years_of_service <= 0 and months_of_service <= 0):
        return None

    service_years = years_of_service + months_of_service / 12
    if service_years < GRATUITY_MIN_YEARS:
        return GratuityResult(
            gratuity_amount=0.0,
            total_service_years=service_years,
            is_eligible=False,
            tax_free_amount=0.0,
            taxable_amount=0.0,
        )

    completed_years = int(service_years)
    if covered:
        amount = min(last_drawn_salary * 15 * completed_years / 26, GRATUITY_CAP_COVERED)
        tax_free_limit = GRATUITY_CAP_COVERED
    else:
        amount = last_drawn_salary * 15 * completed_years / 30
        tax_free_limit = GRATUITY_TAX_FREE_NOT_COVERED

    return GratuityResult(
        gratuity_amount=amount,
        total_service_years=service_years,
        is_eligible=True,
        tax_free_amount=min(amount, tax_free_limit),
        taxable_amount=max(0.0, amount - tax_free_limit),
    )


def compute_inflation(
    current_amount: float, inflation_rate_percent: float, years: float
) -> Optional[InflationResult]:
    """Future cost of today's amount and today's value of the same amount later."""
    if current_amount <= 0 or inflation_rate_percent <= 0 or years <= 0:
        return None

    factor = 1 + inflation_rate_percent / 100
    future_value = current_amount * factor ** years
    real_value = current_amount / factor ** years
    total_inflation = future_value - current_amount

    yearly = []
    for year in range(1, int(min(years, BREAKDOWN_MAX_YEARS)) + 1):
        year_future = current_amount * factor ** year
        yearly.append(
            {
                "year": year,
                "future_value": round(year_future),
                "real_value": round(current_amount / factor ** year),
                "purchasing_power": round(current_amount / year_future * 100),
            }
        )

    return InflationResult(
        future_value=future_value,
        total_inflation=total_inflation,
        real_value=real_value,
        purchasing_power_loss_percent=(1 - real_value / current_amount) * 100,
        average_annual_increase=total_inflation / years,
        yearly=yearly,
    )


@dataclass(frozen=True)
class StockAverageResult:
    total_quantity: float
    total_investment: float
    average_price: float
    current_value: float
    profit_loss: float
    profit_loss_percent: float

    def as_dict(self) -> Dict:
        return asdict(self)


def compute_stock_average(
    purchases: Sequence[Tuple[float, float]], current_price: float
) -> Optional[StockAverageResult]:
    """
    Average cost of a holding bought in several lots.

    Args:
        purchases: (quantity, price) per lot; lots without a quantity are skipped
        current_price: Market price used to value the holding

    Returns:
        StockAverageResult, or None when nothing was invested
    """
    lots = [(quantity, price) for quantity, price in purchases if quantity > 0]
    total_quantity = sum(quantity for quantity, _ in lots)
    total_investment = sum(quantity * price for quantity, price in lots)
    if total_quantity <= 0 or total_investment <= 0:
        return None

    current_value = total_quantity * current_price
    profit_loss = current_value - total_investment
    return StockAverageResult(
        total_quantity=total_quantity,
        total_investment=total_investment,
        average_price=total_investment / total_quantity,
        current_value=current_value,
        profit_loss=profit_loss,
        profit_loss_percent=profit_loss / total_investment * 100,
    )
