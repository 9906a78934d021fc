"""
Compounding and Periodic-Deposit Calculations

Closed-form growth formulas behind the RD, SIP, FD, PPF, NPS, EPF, savings
goal, lump-sum, daily and compound interest calculators, plus the SWP
withdrawal simulation.

Periodic deposits use the annuity-due form (each deposit earns interest for
the period in which it is made):

    M = P * ((1 + r)^n - 1) / r * (1 + r),  r = annual_rate_percent / 1200

Yearly breakdowns evaluate the closed form independently at each year
boundary instead of accumulating month by month, so a row rounded for
display never feeds into the next row. Headline figures always cover the
whole tenure; breakdown rows stop after BREAKDOWN_MAX_YEARS.
"""

import math
from dataclasses import dataclass, asdict, field
from typing import Dict, List, Optional, Tuple

import numpy as np

BREAKDOWN_MAX_YEARS = 100
NPS_ANNUITY_SHARE = 0.4
DAYS_PER_YEAR = 365
WEEKS_PER_YEAR = 52


@dataclass(frozen=True)
class GrowthResult:
    """Result of a periodic-deposit computation."""

    maturity_value: float
    total_contributions: float
    total_interest: float
    periodic_amount: float
    yearly: List[Dict] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class LumpSumResult:
    """Result of a one-time investment computation."""

    maturity_value: float
    principal: float
    total_interest: float
    effective_annual_rate: float
    yearly: List[Dict] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class WithdrawalResult:
    """Result of a systematic withdrawal plan simulation."""

    total_withdrawn: float
    remaining_balance: float
    exhausted_year: Optional[int]
    monthly_withdrawal: float
    yearly: List[Dict] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class PensionResult:
    """NPS corpus split into a lump sum and an annuity."""

    maturity_value: float
    total_contributions: float
    total_interest: float
    lump_sum_withdrawal: float
    annuity_amount: float
    monthly_pension: float

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class ProvidentFundResult:
    maturity_value: float
    total_employee_contribution: float
    total_employer_contribution: float
    total_contributions: float
    total_interest: float
    years: int
    yearly: List[Dict] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class DailyInterestResult:
    daily_rate_percent: float
    daily_interest: float
    total_interest: float
    final_amount: float
    effective_rate: float

    def as_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class SavingsGoalResult:
    """Deposits needed to close the gap between savings and a goal."""

    goal_amount: float
    current_savings: float
    remaining_amount: float
    projected_savings: float
    progress_percent: float
    monthly_savings_needed: float
    weekly_savings_needed: float
    daily_savings_needed: float
    goal_reached: bool

    def as_dict(self) -> Dict:
        return asdict(self)


def periodic_rate(annual_rate_percent: float, periods_per_year: int = 12) -> float:
    """Convert an annual percentage rate to a per-period decimal rate."""
    return annual_rate_percent / (100 * periods_per_year)


def annuity_due_factor(rate: float, periods: float) -> float:
    """Future value of 1 deposited at the start of each of ``periods`` periods."""
    growth = (1 + rate) ** periods
    if growth == 1:
        return float(periods)
    return (growth - 1) / rate * (1 + rate)


def geometric_sum(ratio: float, terms: int) -> float:
    """1 + ratio + ratio^2 + ... + ratio^(terms - 1)."""
    if ratio == 1:
        return float(terms)
    return (ratio ** terms - 1) / (ratio - 1)


def compute_periodic_growth(
    periodic_amount: float, annual_rate_percent: float, periods: float
) -> Optional[GrowthResult]:
    """
    Compute the maturity value of a recurring deposit or SIP.

    Args:
        periodic_amount: Amount deposited every month
        annual_rate_percent: Annual rate in percent
        periods: Number of monthly deposits

    Returns:
        GrowthResult, or None when any input is not positive
    """
    if periodic_amount <= 0 or annual_rate_percent <= 0 or periods <= 0:
        return None

    r = periodic_rate(annual_rate_percent)
    maturity_value = periodic_amount * annuity_due_factor(r, periods)
    total_contributions = periodic_amount * periods

    return GrowthResult(
        maturity_value=maturity_value,
        total_contributions=total_contributions,
        total_interest=maturity_value - total_contributions,
        periodic_amount=periodic_amount,
    )


def compute_required_deposit(
    target_amount: float, annual_rate_percent: float, periods: float
) -> Optional[GrowthResult]:
    """Monthly deposit needed to reach ``target_amount`` (reverse RD/SIP)."""
    if target_amount <= 0 or annual_rate_percent <= 0 or periods <= 0:
        return None

    r = periodic_rate(annual_rate_percent)
    deposit = target_amount / annuity_due_factor(r, periods)
    total_contributions = deposit * periods

    return GrowthResult(
        maturity_value=target_amount,
        total_contributions=total_contributions,
        total_interest=target_amount - total_contributions,
        periodic_amount=deposit,
    )


def compute_yearly_breakdown(
    periodic_amount: float, annual_rate_percent: float, periods: float
) -> List[Dict]:
    """
    Year-end values of a monthly deposit plan.

    The deposit is rounded to the nearest unit first. Each year's value is
    the closed form at min(12 * year, periods) months; a final partial year
    gets its own row.

    Returns:
        Rows of year, months, invested, value and interest (rounded to
        units), at most BREAKDOWN_MAX_YEARS of them
    """
    if periodic_amount <= 0 or annual_rate_percent <= 0 or periods <= 0:
        return []

    amount = float(round(periodic_amount))
    r = periodic_rate(annual_rate_percent)
    total_months = int(periods)
    years = min(math.ceil(total_months / 12), BREAKDOWN_MAX_YEARS)

    months = np.minimum(np.arange(1, years + 1) * 12, total_months)
    values = amount * (((1 + r) ** months - 1) / r) * (1 + r)
    invested = amount * months

    return [
        {
            "year": int(year),
            "months": int(m),
            "invested": round(float(inv)),
            "value": round(float(val)),
            "interest": round(float(val - inv)),
        }
        for year, m, inv, val in zip(range(1, years + 1), months, invested, values)
    ]


def compute_step_up_growth(
    periodic_amount: float,
    annual_rate_percent: float,
    periods: float,
    step_up_percent: float,
) -> Optional[GrowthResult]:
    """
    SIP whose monthly amount increases by ``step_up_percent`` every year.

    Each year's deposits form an annuity-due block that then compounds for
    the months remaining after that year. The blocks form a geometric
    series, so the maturity value is summed in closed form and only the
    listed rows are walked year by year.
    """
    if step_up_percent <= 0:
        result = compute_periodic_growth(periodic_amount, annual_rate_percent, periods)
        if result is None:
            return None
        return GrowthResult(
            maturity_value=result.maturity_value,
            total_contributions=result.total_contributions,
            total_interest=result.total_interest,
            periodic_amount=result.periodic_amount,
            yearly=compute_yearly_breakdown(periodic_amount, annual_rate_percent, periods),
        )

    if periodic_amount <= 0 or annual_rate_percent <= 0 or periods <= 0:
        return None

    r = periodic_rate(annual_rate_percent)
    total_months = int(periods)
    full_years, partial_months = divmod(total_months, 12)
    step = 1 + step_up_percent / 100
    year_growth = (1 + r) ** 12

    maturity_value = 0.0
    total_contributions = 0.0
    if full_years:
        # Block y compounds for 12 * (full_years - y) + partial_months more months
        maturity_value = (
            periodic_amount
            * annuity_due_factor(r, 12)
            * year_growth ** (full_years - 1)
            * geometric_sum(step / year_growth, full_years)
            * (1 + r) ** partial_months
        )
        total_contributions = 12 * periodic_amount * geometric_sum(step, full_years)
    if partial_months:
        last_monthly = periodic_amount * step ** full_years
        maturity_value += last_monthly * annuity_due_factor(r, partial_months)
        total_contributions += last_monthly * partial_months

    yearly = []
    cumulative = 0.0
    listed_years = min(math.ceil(total_months / 12), BREAKDOWN_MAX_YEARS)
    for year in range(1, listed_years + 1):
        months_in_year = min(12, total_months - (year - 1) * 12)
        monthly = periodic_amount * step ** (year - 1)
        invested = monthly * months_in_year
        cumulative += invested
        yearly.append(
            {
                "year": year,
                "monthly_amount": round(monthly, 2),
                "invested": round(invested),
                "cumulative_invested": round(cumulative),
            }
        )

    return GrowthResult(
        maturity_value=maturity_value,
        total_contributions=total_contributions,
        total_interest=maturity_value - total_contributions,
        periodic_amount=periodic_amount,
        yearly=yearly,
    )


def compute_annual_deposit_growth(
    annual_deposit: float, annual_rate_percent: float, years: int
) -> Optional[GrowthResult]:
    """
    PPF-style plan: one deposit at the start of each year, compounded yearly.
    """
    years = int(years)
    if annual_deposit <= 0 or annual_rate_percent <= 0 or years <= 0:
        return None

    rate = annual_rate_percent / 100
    year_numbers = np.arange(1, min(years, BREAKDOWN_MAX_YEARS) + 1)
    balances = annual_deposit * (((1 + rate) ** year_numbers - 1) / rate) * (1 + rate)

    yearly = [
        {
            "year": int(year),
            "deposited": round(annual_deposit * int(year)),
            "balance": round(float(balance)),
            "interest": round(float(balance) - annual_deposit * int(year)),
        }
        for year, balance in zip(year_numbers, balances)
    ]

    maturity_value = annual_deposit * annuity_due_factor(rate, years)
    total_contributions = annual_deposit * years
    return GrowthResult(
        maturity_value=maturity_value,
        total_contributions=total_contributions,
        total_interest=maturity_value - total_contributions,
        periodic_amount=annual_deposit,
        yearly=yearly,
    )


def compute_pension_plan(
    monthly_contribution: float,
    annual_rate_percent: float,
    months: float,
    annuity_rate_percent: float,
    annuity_share: float = NPS_ANNUITY_SHARE,
) -> Optional[PensionResult]:
    """
    NPS corpus at retirement.

    The corpus grows like a SIP. At retirement ``annuity_share`` of it buys
    an annuity paying ``annuity_rate_percent`` a year; the rest is withdrawn
    as a lump sum.
    """
    growth = compute_periodic_growth(monthly_contribution, annual_rate_percent, months)
    if growth is None:
        return None

    annuity_amount = growth.maturity_value * annuity_share
    return PensionResult(
        maturity_value=growth.maturity_value,
        total_contributions=growth.total_contributions,
        total_interest=growth.total_interest,
        lump_sum_withdrawal=growth.maturity_value - annuity_amount,
        annuity_amount=annuity_amount,
        monthly_pension=annuity_amount * periodic_rate(annuity_rate_percent),
    )


def compute_provident_fund(
    monthly_salary: float,
    years: int,
    employee_percent: float,
    employer_percent: float,
    salary_growth_percent: float = 0.0,
    annual_rate_percent: float = 0.0,
) -> Optional[ProvidentFundResult]:
    """
    EPF balance at retirement.

    Each year's contribution is a share of that year's salary, paid in at
    the start of the year and compounded yearly. The salary then grows by
    ``salary_growth_percent`` for the next year.

    Args:
        monthly_salary: Basic salary per month in the first year
        years: Years until retirement
        employee_percent: Employee share of salary, in percent
        employer_percent: Employer share of salary, in percent
        salary_growth_percent: Yearly salary increase, in percent
        annual_rate_percent: EPF interest rate, in percent (zero allowed)

    Returns:
        ProvidentFundResult, or None when salary, years or the combined
        contribution is not positive
    """
    years = int(years)
    contribution_percent = employee_percent + employer_percent
    if monthly_salary <= 0 or years <= 0 or contribution_percent <= 0:
        return None
    if annual_rate_percent < 0:
        return None

    first_contribution = monthly_salary * 12 * contribution_percent / 100
    salary_growth = 1 + salary_growth_percent / 100
    interest = 1 + annual_rate_percent / 100

    # Contribution k (from 0) compounds for years - k years
    total_contributions = first_contribution * geometric_sum(salary_growth, years)
    maturity_value = (
        first_contribution
        * interest ** years
        * geometric_sum(salary_growth / interest, years)
    )

    yearly = []
    salary = monthly_salary
    balance = 0.0
    for year in range(1, min(years, BREAKDOWN_MAX_YEARS) + 1):
        contribution = salary * 12 * contribution_percent / 100
        balance = (balance + contribution) * interest
        yearly.append(
            {
                "year": year,
                "monthly_salary": round(salary),
                "contribution": round(contribution),
                "balance": round(balance),
            }
        )
        salary *= salary_growth

    employee_share = employee_percent / contribution_percent
    return ProvidentFundResult(
        maturity_value=maturity_value,
        total_employee_contribution=total_contributions * employee_share,
        total_employer_contribution=total_contributions * (1 - employee_share),
        total_contributions=total_contributions,
        total_interest=maturity_value - total_contributions,
        years=years,
        yearly=yearly,
    )


def compute_savings_goal(
    goal_amount: float,
    current_savings: float,
    months: float,
    annual_rate_percent: float = 0.0,
) -> Optional[SavingsGoalResult]:
    """
    Savings needed each month (and week and day) to reach a goal.

    Current savings keep growing at the given rate. The monthly figure is
    the reverse annuity-due deposit for the remaining gap, or a plain split
    of the gap when no rate is given. Weekly and daily figures spread the
    same yearly total.
    """
    if goal_amount <= 0 or months <= 0 or current_savings < 0 or annual_rate_percent < 0:
        return None

    r = periodic_rate(annual_rate_percent)
    projected = current_savings * (1 + r) ** months
    gap = max(0.0, goal_amount - projected)

    if r > 0:
        monthly = gap / annuity_due_factor(r, months)
    else:
        monthly = gap / months

    return SavingsGoalResult(
        goal_amount=goal_amount,
        current_savings=current_savings,
        remaining_amount=max(0.0, goal_amount - current_savings),
        projected_savings=projected,
        progress_percent=min(current_savings / goal_amount * 100, 100.0),
        monthly_savings_needed=monthly,
        weekly_savings_needed=monthly * 12 / WEEKS_PER_YEAR,
        daily_savings_needed=monthly * 12 / DAYS_PER_YEAR,
        goal_reached=gap == 0,
    )


def compute_lump_sum_growth(
    present_value: float,
    annual_rate_percent: float,
    periods: float,
    periods_per_year: int = 12,
) -> Optional[LumpSumResult]:
    """
    Grow a single investment: present_value * (1 + r)^periods.

    A zero rate is allowed here since nothing divides by it.
    """
    if present_value <= 0 or annual_rate_percent < 0 or periods <= 0:
        return None

    r = periodic_rate(annual_rate_percent, periods_per_year)
    maturity_value = present_value * (1 + r) ** periods
    years = periods / periods_per_year

    return LumpSumResult(
        maturity_value=maturity_value,
        principal=present_value,
        total_interest=maturity_value - present_value,
        effective_annual_rate=((maturity_value / present_value) ** (1 / years) - 1) * 100,
    )


def compute_daily_interest(
    principal: float, annual_rate_percent: float, days: float, compound: bool = False
) -> Optional[DailyInterestResult]:
    """Interest accrued day by day at annual_rate_percent / 365."""
    if principal <= 0 or annual_rate_percent <= 0 or days <= 0:
        return None

    daily_rate = periodic_rate(annual_rate_percent, DAYS_PER_YEAR)
    if compound:
        final_amount = principal * (1 + daily_rate) ** days
        total_interest = final_amount - principal
    else:
        total_interest = principal * daily_rate * days
        final_amount = principal + total_interest

    return DailyInterestResult(
        daily_rate_percent=daily_rate * 100,
        daily_interest=principal * daily_rate,
        total_interest=total_interest,
        final_amount=final_amount,
        effective_rate=total_interest / principal * 100,
    )


def compute_compound_interest(
    principal: float,
    annual_rate_percent: float,
    years: float,
    compounding_per_year: int = 4,
) -> Optional[LumpSumResult]:
    """
    Fixed deposit / compound interest: P * (1 + r/n)^(n*t).

    Yearly rows compare the compound amount with simple interest on the
    same principal.
    """
    if principal <= 0 or annual_rate_percent <= 0 or years <= 0:
        return None

    n = compounding_per_year if compounding_per_year > 0 else 1
    rate = annual_rate_percent / 100
    maturity_value = principal * (1 + rate / n) ** (n * years)

    year_numbers = np.arange(1, min(math.floor(years), BREAKDOWN_MAX_YEARS) + 1)
    compound = principal * (1 + rate / n) ** (n * year_numbers)
    simple = principal * (1 + rate * year_numbers)
    yearly = [
        {
            "year": int(year),
            "compound": round(float(c)),
            "simple": round(float(s)),
            "difference": round(float(c - s)),
        }
        for year, c, s in zip(year_numbers, compound, simple)
    ]

    return LumpSumResult(
        maturity_value=maturity_value,
        principal=principal,
        total_interest=maturity_value - principal,
        effective_annual_rate=((maturity_value / principal) ** (1 / years) - 1) * 100,
        yearly=yearly,
    )


def compute_required_principal(
    target_amount: float,
    annual_rate_percent: float,
    years: float,
    compounding_per_year: int = 4,
) -> Optional[LumpSumResult]:
    """Deposit needed today to mature at ``target_amount`` (reverse FD)."""
    if target_amount <= 0 or annual_rate_percent <= 0 or years <= 0:
        return None

    n = compounding_per_year if compounding_per_year > 0 else 1
    rate = annual_rate_percent / 100
    principal = target_amount / (1 + rate / n) ** (n * years)

    return LumpSumResult(
        maturity_value=target_amount,
        principal=principal,
        total_interest=target_amount - principal,
        effective_annual_rate=((target_amount / principal) ** (1 / years) - 1) * 100,
    )


def _balance_after(balance: float, withdrawal: float, r: float, months: int) -> float:
    """Balance after ``months`` full grow-then-withdraw months."""
    if r == 0:
        return balance - withdrawal * months
    return (balance - withdrawal / r) * (1 + r) ** months + withdrawal / r


def _continue_withdrawals(
    balance: float, withdrawal: float, r: float, months: int
) -> Tuple[float, float, Optional[int]]:
    """
    Run the withdrawal plan for ``months`` more months without iterating.

    Returns:
        (amount withdrawn, balance left, month the plan ran dry or None)
    """
    if r > 0 and balance * r >= withdrawal:
        # Interest covers the withdrawal, so the balance never falls
        full = months
    elif r == 0:
        full = min(months, int(balance // withdrawal))
    else:
        estimate = math.log(withdrawal / (withdrawal - balance * r)) / math.log1p(r)
        full = min(months, int(estimate))
        # One step either way absorbs rounding in the logarithm
        if full > 0 and _balance_after(balance, withdrawal, r, full) < 0:
            full -= 1
        elif full < months and _balance_after(balance, withdrawal, r, full + 1) >= 0:
            full += 1

    withdrawn = withdrawal * full
    remaining = max(0.0, _balance_after(balance, withdrawal, r, full))
    if remaining == 0:
        return withdrawn, 0.0, full
    if full == months:
        return withdrawn, remaining, None

    # The next month pays out whatever is left
    return withdrawn + remaining * (1 + r), 0.0, full + 1


def simulate_withdrawals(
    initial_investment: float,
    monthly_withdrawal: float,
    annual_rate_percent: float,
    months: int,
) -> Optional[WithdrawalResult]:
    """
    Simulate a systematic withdrawal plan.

    Each month the balance grows first, then the withdrawal is taken. When
    the balance cannot cover a withdrawal the remainder is paid out and the
    plan stops. The listed years are simulated month by month; any months
    past BREAKDOWN_MAX_YEARS are settled in closed form.
    """
    if initial_investment <= 0 or monthly_withdrawal <= 0 or months <= 0:
        return None

    r = periodic_rate(max(annual_rate_percent, 0.0))
    total_months = int(months)
    listed_months = min(total_months, BREAKDOWN_MAX_YEARS * 12)
    balance = initial_investment
    total_withdrawn = 0.0
    exhausted_year = None
    yearly = []

    for year in range(1, math.ceil(listed_months / 12) + 1):
        start_balance = balance
        year_withdrawn = 0.0
        first_month = (year - 1) * 12 + 1

        for _ in range(first_month, min(first_month + 12, listed_months + 1)):
            balance *= 1 + r
            if balance >= monthly_withdrawal:
                balance -= monthly_withdrawal
                year_withdrawn += monthly_withdrawal
            else:
                year_withdrawn += balance
                balance = 0.0
                break

        total_withdrawn += year_withdrawn
        yearly.append(
            {
                "year": year,
                "start_balance": round(start_balance),
                "withdrawn": round(year_withdrawn),
                "end_balance": round(balance),
                "total_withdrawn": round(total_withdrawn),
            }
        )

        if balance == 0:
            exhausted_year = year
            break

    if exhausted_year is None and total_months > listed_months:
        withdrawn, balance, dry_month = _continue_withdrawals(
            balance, monthly_withdrawal, r, total_months - listed_months
        )
        total_withdrawn += withdrawn
        if dry_month is not None:
            exhausted_year = math.ceil((listed_months + dry_month) / 12)

    return WithdrawalResult(
        total_withdrawn=total_withdrawn,
        remaining_balance=balance,
        exhausted_year=exhausted_year,
        monthly_withdrawal=monthly_withdrawal,
        yearly=yearly,
    )
