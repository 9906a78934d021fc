"""
Loan Amortization Calculations

Implements the EMI (equated monthly installment) family used by the loan,
mortgage and personal-loan calculators: installment, reverse EMI and the
month-by-month schedule.

Rates are annual percentages (10 means 10%). Results are not rounded here,
except for the display schedule.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import List, Dict, Optional

from dateutil.relativedelta import relativedelta

# Longest schedule listed row by row (100 years); headline figures still
# cover the full tenure.
SCHEDULE_MAX_MONTHS = 1200


@dataclass(frozen=True)
class AmortizationResult:
    """Result of an EMI computation."""

    installment: float
    total_payment: float
    total_interest: float
    principal: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return annual_rate_percent / 1200


def calculate_payment(
    principal: float, annual_rate_percent: float, months: int
) -> float:
    """
    Calculate the monthly installment.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate in percent (e.g., 10 for 10%)
        months: Tenure in months

    Returns:
        Monthly installment (0.0 when principal or months is not positive)
    """
    if principal <= 0:
        return 0.0
    if months <= 0:
        return 0.0

    r = monthly_rate(annual_rate_percent)

    # The annuity formula divides by r
    if r == 0:
        return principal / months

    growth = (1 + r) ** months
    if growth == 1:
        # Rate too small to register in floating point
        return principal / months
    return principal * r * growth / (growth - 1)


def compute_amortization(
    principal: float, annual_rate_percent: float, tenure_months: float
) -> Optional[AmortizationResult]:
    """
    Compute installment, total payment and total interest for a loan.

    Returns None when principal or tenure is not positive or the rate is
    negative.
    """
    if principal <= 0 or tenure_months <= 0 or annual_rate_percent < 0:
        return None

    installment = calculate_payment(principal, annual_rate_percent, tenure_months)
    if annual_rate_percent == 0:
        return AmortizationResult(
            installment=installment,
            total_payment=principal,
            total_interest=0.0,
            principal=principal,
        )

    total_payment = installment * tenure_months
    return AmortizationResult(
        installment=installment,
        total_payment=total_payment,
        total_interest=total_payment - principal,
        principal=principal,
    )


def compute_reverse_amortization(
    installment: float, annual_rate_percent: float, tenure_months: float
) -> Optional[AmortizationResult]:
    """
    Compute the principal a given installment can service (reverse EMI).

    Present value of an ordinary annuity; at zero rate this is
    installment * tenure_months.
    """
    if installment <= 0 or tenure_months <= 0 or annual_rate_percent < 0:
        return None

    r = monthly_rate(annual_rate_percent)
    if r == 0:
        principal = installment * tenure_months
    else:
        principal = installment * (1 - (1 + r) ** -tenure_months) / r

    total_payment = installment * tenure_months
    return AmortizationResult(
        installment=installment,
        total_payment=total_payment,
        total_interest=total_payment - principal,
        principal=principal,
    )


def generate_amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    tenure_months: int,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a month-by-month amortization schedule.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate in percent
        tenure_months: Tenure in months
        start_date: Date of first installment (defaults to today)

    Returns:
        List of schedule rows, amounts rounded to 2 decimals. At most
        SCHEDULE_MAX_MONTHS rows are listed.
    """
    if principal <= 0 or tenure_months <= 0 or annual_rate_percent < 0:
        return []

    schedule = []
    balance = principal
    r = monthly_rate(annual_rate_percent)
    payment = calculate_payment(principal, annual_rate_percent, tenure_months)

    if start_date is None:
        start_date = date.today()

    months = int(tenure_months)
    for period in range(1, min(months, SCHEDULE_MAX_MONTHS) + 1):
        period_date = start_date + relativedelta(months=period - 1)

        interest = balance * r
        if period == months:
            # Final installment clears floating residue
            principal_pmt = balance
        else:
            principal_pmt = min(payment - interest, balance)

        ending_balance = balance - principal_pmt

        schedule.append(
            {
                "period": period,
                "date": period_date.isoformat(),
                "beginning_balance": round(balance, 2),
                "payment": round(principal_pmt + interest, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(max(0, ending_balance), 2),
            }
        )

        balance = max(0.0, ending_balance)

    return schedule


def summarize_by_year(schedule: List[Dict]) -> List[Dict]:
    """Group a monthly schedule into loan years (12 installments each)."""
    years: List[Dict] = []
    for row in schedule:
        year = (row["period"] - 1) // 12 + 1
        if not years or years[-1]["year"] != year:
            years.append(
                {"year": year, "principal": 0.0, "interest": 0.0, "ending_balance": 0.0}
            )
        current = years[-1]
        current["principal"] = round(current["principal"] + row["principal"], 2)
        current["interest"] = round(current["interest"] + row["interest"], 2)
        current["ending_balance"] = row["ending_balance"]
    return years
