"""
Tests for the numeric calculation kernels.
"""

import math
import pytest
from datetime import date

from finclamp.calculations.amortization import (
    SCHEDULE_MAX_MONTHS,
    calculate_payment,
    compute_amortization,
    compute_reverse_amortization,
    generate_amortization_schedule,
    summarize_by_year,
)
from finclamp.calculations.compounding import (
    BREAKDOWN_MAX_YEARS,
    annuity_due_factor,
    compute_annual_deposit_growth,
    compute_compound_interest,
    compute_daily_interest,
    compute_lump_sum_growth,
    compute_pension_plan,
    compute_periodic_growth,
    compute_provident_fund,
    compute_required_deposit,
    compute_required_principal,
    compute_savings_goal,
    compute_step_up_growth,
    compute_yearly_breakdown,
    periodic_rate,
    simulate_withdrawals,
)
from finclamp.calculations.parsing import (
    parse_amount,
    parse_amounts,
    parse_count,
    parse_pairs,
    sanitize_input,
)
from finclamp.calculations.ratios import (
    compute_bill_split,
    compute_cagr,
    compute_discount,
    compute_gratuity,
    compute_inflation,
    compute_roi,
    compute_simple_interest,
    compute_stock_average,
    compute_tip,
)
from finclamp.calculations.tax import (
    TaxSlab,
    compute_freelancer_tax,
    compute_income_tax,
    compute_progressive_tax,
    get_slabs,
    validate_slabs,
)
from finclamp.exceptions import InvalidSlabTableError


class TestParsing:
    """Test numeric input parsing."""

    def test_parse_grouped_amount(self):
        """Grouping commas are ignored."""
        assert parse_amount("5,00,000") == 500000
        assert parse_amount("1,250,000.50") == 1250000.5

    def test_parse_decimal(self):
        assert parse_amount("7.5") == 7.5
        assert parse_amount(".5") == 0.5

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_is_zero(self, raw):
        """Blank input parses to zero."""
        assert parse_amount(raw) == 0.0

    @pytest.mark.parametrize("raw", ["abc", "-5", "1e5", "1.2.3", ".", "nan", "inf", "12abc"])
    def test_invalid_is_zero(self, raw):
        """Invalid input parses to zero instead of raising."""
        assert parse_amount(raw) == 0.0

    def test_parse_count(self):
        assert parse_count("3.7") == 3
        assert parse_count("", default=1) == 1
        assert parse_count("0", default=2) == 2

    def test_parse_amounts(self):
        """Semicolon lists skip blank, invalid and zero entries."""
        assert parse_amounts("100; 0;abc;250.5") == [100.0, 250.5]
        assert parse_amounts("") == []

    def test_parse_pairs(self):
        """Entries keep their position; a missing half is zero."""
        assert parse_pairs("10:150; 5:162.5;;:") == [(10.0, 150.0), (5.0, 162.5)]
        assert parse_pairs("7") == [(7.0, 0.0)]
        assert parse_pairs(None) == []

    def test_sanitize_drops_signs_and_exponents(self):
        assert sanitize_input("-250") == "250"
        assert sanitize_input("1e5") == "15"
        assert sanitize_input(None) == ""

    def test_sanitize_keeps_first_decimal_point(self):
        assert sanitize_input("1.2.3") == "1.23"
        assert sanitize_input("5,00,000") == "5,00,000"


class TestAmortization:
    """Test loan amortization calculations."""

    def test_standard_emi(self):
        """500,000 at 10% over 24 months."""
        result = compute_amortization(500000, 10, 24)
        assert abs(result.installment - 23072.35) < 0.5
        assert abs(result.total_payment - result.installment * 24) < 1e-6
        assert abs(result.total_interest - (result.total_payment - 500000)) < 1e-6

    def test_zero_rate(self):
        """Zero rate splits the principal evenly with no interest."""
        result = compute_amortization(120000, 0, 12)
        assert result.installment == 10000
        assert result.total_payment == 120000
        assert result.total_interest == 0

    def test_rate_too_small_for_floating_point(self):
        result = compute_amortization(1000, 1e-14, 10)
        assert result.installment == 100
        assert math.isfinite(result.total_interest)

    @pytest.mark.parametrize(
        "principal,rate,months", [(0, 10, 24), (500000, 10, 0), (500000, -1, 24)]
    )
    def test_incomplete_inputs(self, principal, rate, months):
        """Missing or invalid inputs produce no result."""
        assert compute_amortization(principal, rate, months) is None

    def test_reverse_emi_inverts_emi(self):
        payment = calculate_payment(500000, 10, 24)
        result = compute_reverse_amortization(payment, 10, 24)
        assert abs(result.principal - 500000) < 0.01

    def test_reverse_emi_zero_rate(self):
        result = compute_reverse_amortization(10000, 0, 12)
        assert result.principal == 120000
        assert result.total_interest == 0

    def test_schedule(self):
        """Schedule rows pay the loan off exactly."""
        schedule = generate_amortization_schedule(500000, 10, 24, start_date=date(2025, 1, 15))

        assert len(schedule) == 24
        assert schedule[0]["date"] == "2025-01-15"
        assert schedule[1]["date"] == "2025-02-15"
        assert schedule[-1]["ending_balance"] == 0
        assert abs(sum(row["principal"] for row in schedule) - 500000) < 0.5

        result = compute_amortization(500000, 10, 24)
        assert abs(sum(row["interest"] for row in schedule) - result.total_interest) < 1

    def test_summarize_by_year(self):
        schedule = generate_amortization_schedule(500000, 10, 24, start_date=date(2025, 1, 1))
        years = summarize_by_year(schedule)

        assert [y["year"] for y in years] == [1, 2]
        assert years[-1]["ending_balance"] == 0
        assert years[0]["interest"] > years[1]["interest"]

    def test_schedule_rows_capped(self):
        """Very long tenures list at most a century of rows."""
        schedule = generate_amortization_schedule(100000, 0, 9000 * 12, start_date=date(2025, 1, 1))

        assert len(schedule) == SCHEDULE_MAX_MONTHS
        assert schedule[-1]["date"] == "2124-12-01"
        assert schedule[-1]["ending_balance"] > 0

    def test_long_tenure_headline_covers_full_term(self):
        result = compute_amortization(100000, 1, 8000 * 12)

        assert math.isfinite(result.installment)
        assert abs(result.total_payment - result.installment * 96000) < 1e-6


class TestTax:
    """Test progressive slab tax calculations."""

    def test_new_regime_breakdown(self):
        """900,000 under the new regime fills three slabs."""
        result = compute_progressive_tax(900000, get_slabs("new"))

        assert result.total_tax == 45000
        assert [row.taxable_amount for row in result.breakdown] == [300000, 300000, 300000]
        assert [row.tax for row in result.breakdown] == [0, 15000, 30000]
        assert [row.slab.rate_percent for row in result.breakdown] == [0, 5, 10]

    def test_boundary_is_taxed_in_lower_slab(self):
        at_boundary = compute_progressive_tax(300000, get_slabs("new"))
        assert at_boundary.total_tax == 0
        assert len(at_boundary.breakdown) == 1

        above = compute_progressive_tax(300001, get_slabs("new"))
        assert len(above.breakdown) == 2
        assert above.breakdown[1].taxable_amount == 1
        assert abs(above.total_tax - 0.05) < 1e-9

    def test_zero_income(self):
        """Zero income has no tax and an empty breakdown."""
        result = compute_progressive_tax(0, get_slabs("new"))
        assert result.total_tax == 0
        assert result.breakdown == ()

    def test_old_regime(self):
        result = compute_progressive_tax(1200000, get_slabs("old"))
        assert result.total_tax == 172500

    def test_income_tax_with_cess(self):
        result = compute_income_tax(900000, regime="new")
        assert result.total_tax == 45000
        assert result.cess == 1800
        assert result.total_tax_with_cess == 46800
        assert result.net_income == 853200
        assert abs(result.effective_tax_rate - 5.2) < 1e-9

    def test_deductions_never_go_negative(self):
        result = compute_income_tax(200000, deductions=500000)
        assert result.taxable_income == 0
        assert result.total_tax_with_cess == 0
        assert result.breakdown == ()

    def test_no_income_no_result(self):
        assert compute_income_tax(0) is None

    def test_top_slab_serializes_open_ended(self):
        data = compute_income_tax(2000000).as_dict()
        assert data["breakdown"][-1]["max"] is None
        assert data["breakdown"][0]["max"] == 300000

    def test_unknown_regime(self):
        with pytest.raises(KeyError):
            get_slabs("flat")

    @pytest.mark.parametrize(
        "slabs",
        [
            [],
            [TaxSlab(100, 200, 5)],
            [TaxSlab(0, 100, 0), TaxSlab(150, math.inf, 10)],
            [TaxSlab(0, 0, 0)],
        ],
    )
    def test_invalid_slab_tables(self, slabs):
        with pytest.raises(InvalidSlabTableError):
            validate_slabs(slabs)

    def test_freelancer_tax(self):
        """Expenses are netted off before slabs; professional tax is added last."""
        result = compute_freelancer_tax(
            1200000, business_expenses=200000, professional_tax=2500
        )
        assert result.gross_income == 1000000
        assert result.income_tax == 60000
        assert result.cess == 2400
        assert result.total_tax == 64900
        assert result.quarterly_advance_tax == 15000
        assert result.net_income == 1000000 - 64900

    def test_freelancer_expenses_exceed_income(self):
        assert compute_freelancer_tax(100000, business_expenses=150000) is None
        result = compute_freelancer_tax(100000, other_income=50000, business_expenses=150000)
        assert result.gross_income == 50000


class TestCompounding:
    """Test recurring deposit, SIP, FD, PPF and SWP calculations."""

    def test_periodic_rate(self):
        assert periodic_rate(12) == 0.01
        assert periodic_rate(12, 4) == 0.03

    def test_single_deposit_earns_one_period(self):
        """Annuity-due: a deposit earns interest in the month it is made."""
        result = compute_periodic_growth(1000, 12, 1)
        assert abs(result.maturity_value - 1010) < 1e-9

    def test_one_year_rd(self):
        result = compute_periodic_growth(1000, 12, 12)
        assert abs(result.maturity_value - 12809.33) < 0.01
        assert result.total_contributions == 12000
        assert abs(result.total_interest - (result.maturity_value - 12000)) < 1e-9

    def test_rd_monotonic(self):
        """Maturity grows with deposit, rate and tenure."""
        base = compute_periodic_growth(5000, 7, 60).maturity_value
        assert compute_periodic_growth(6000, 7, 60).maturity_value > base
        assert compute_periodic_growth(5000, 8, 60).maturity_value > base
        assert compute_periodic_growth(5000, 7, 61).maturity_value > base
        assert base > 5000 * 60

    @pytest.mark.parametrize("amount,rate,months", [(0, 7, 60), (5000, 0, 60), (5000, 7, 0)])
    def test_rd_incomplete_inputs(self, amount, rate, months):
        assert compute_periodic_growth(amount, rate, months) is None

    def test_required_deposit_inverts_growth(self):
        target = compute_periodic_growth(5000, 7, 60).maturity_value
        result = compute_required_deposit(target, 7, 60)
        assert abs(result.periodic_amount - 5000) < 1e-6

    def test_yearly_breakdown(self):
        rows = compute_yearly_breakdown(5000, 7, 60)
        maturity = compute_periodic_growth(5000, 7, 60).maturity_value

        assert [row["months"] for row in rows] == [12, 24, 36, 48, 60]
        assert rows[-1]["value"] == round(maturity)
        assert rows[-1]["invested"] == 300000
        assert all(a["value"] < b["value"] for a, b in zip(rows, rows[1:]))

    def test_yearly_breakdown_partial_year(self):
        rows = compute_yearly_breakdown(5000, 7, 30)
        assert [row["months"] for row in rows] == [12, 24, 30]

    def test_step_up_zero_matches_plain_sip(self):
        plain = compute_periodic_growth(5000, 12, 120)
        stepped = compute_step_up_growth(5000, 12, 120, 0)
        assert stepped.maturity_value == plain.maturity_value
        assert len(stepped.yearly) == 10

    def test_step_up_single_year_matches_plain_sip(self):
        plain = compute_periodic_growth(5000, 12, 12)
        stepped = compute_step_up_growth(5000, 12, 12, 10)
        assert abs(stepped.maturity_value - plain.maturity_value) < 1e-6

    def test_step_up_blocks(self):
        """Each year's block compounds for the months remaining after it."""
        r = periodic_rate(12)
        expected = 1000 * annuity_due_factor(r, 12) * (1 + r) ** 12 + 1100 * annuity_due_factor(
            r, 12
        )
        result = compute_step_up_growth(1000, 12, 24, 10)

        assert abs(result.maturity_value - expected) < 1e-6
        assert abs(result.total_contributions - 25200) < 1e-6
        assert result.yearly[1]["monthly_amount"] == 1100

    def test_step_up_beats_flat(self):
        flat = compute_step_up_growth(5000, 12, 120, 0)
        stepped = compute_step_up_growth(5000, 12, 120, 10)
        assert stepped.maturity_value > flat.maturity_value

    def test_ppf(self):
        one_year = compute_annual_deposit_growth(150000, 7.1, 1)
        assert abs(one_year.maturity_value - 160650) < 0.01

        result = compute_annual_deposit_growth(150000, 7.1, 15)
        assert len(result.yearly) == 15
        assert result.total_contributions == 2250000
        assert abs(result.yearly[-1]["balance"] - result.maturity_value) <= 1

    def test_lump_sum(self):
        result = compute_lump_sum_growth(100000, 12, 12)
        assert abs(result.maturity_value - 112682.50) < 0.01
        assert abs(result.effective_annual_rate - 12.6825) < 0.001

    def test_lump_sum_zero_rate(self):
        result = compute_lump_sum_growth(100000, 0, 12)
        assert result.maturity_value == 100000
        assert result.total_interest == 0

    def test_compound_interest(self):
        annual = compute_compound_interest(100000, 10, 1, 1)
        assert abs(annual.maturity_value - 110000) < 1e-6
        assert annual.yearly == [
            {"year": 1, "compound": 110000, "simple": 110000, "difference": 0}
        ]

        quarterly = compute_compound_interest(100000, 10, 2, 4)
        assert abs(quarterly.maturity_value - 121840.29) < 0.01
        assert quarterly.yearly[1]["simple"] == 120000
        assert quarterly.yearly[1]["difference"] == 1840

    def test_required_principal(self):
        result = compute_required_principal(110000, 10, 1, 1)
        assert abs(result.principal - 100000) < 1e-6

    def test_withdrawals_exhaust_corpus(self):
        """At 0% a 100,000 corpus covers ten withdrawals of 10,000."""
        result = simulate_withdrawals(100000, 10000, 0, 24)
        assert result.total_withdrawn == 100000
        assert result.remaining_balance == 0
        assert result.exhausted_year == 1
        assert len(result.yearly) == 1

    def test_withdrawals_sustained(self):
        result = simulate_withdrawals(1000000, 5000, 12, 12)
        assert result.exhausted_year is None
        assert result.total_withdrawn == 60000
        assert result.remaining_balance > 1000000

    def test_withdrawals_incomplete_inputs(self):
        assert simulate_withdrawals(0, 5000, 12, 12) is None
        assert simulate_withdrawals(100000, 0, 12, 12) is None

    def test_breakdown_rows_capped(self):
        rows = compute_yearly_breakdown(5000, 7, 12 * 500)
        assert len(rows) == BREAKDOWN_MAX_YEARS
        assert rows[-1]["months"] == BREAKDOWN_MAX_YEARS * 12

    def test_step_up_partial_final_year(self):
        """Closed-form step-up matches summing each year's block."""
        r = periodic_rate(12)
        expected = 0.0
        for year in range(1, 5):
            months_in_year = min(12, 42 - (year - 1) * 12)
            remaining = 42 - (year - 1) * 12 - months_in_year
            expected += (
                1000 * 1.1 ** (year - 1) * annuity_due_factor(r, months_in_year) * (1 + r) ** remaining
            )

        result = compute_step_up_growth(1000, 12, 42, 10)

        assert abs(result.maturity_value - expected) < 1e-6
        assert abs(result.total_contributions - (12000 * (1 + 1.1 + 1.21) + 6 * 1331)) < 1e-6
        assert [row["year"] for row in result.yearly] == [1, 2, 3, 4]

    def test_step_up_long_tenure(self):
        result = compute_step_up_growth(1000, 1, 12 * 1000, 1)

        assert len(result.yearly) == BREAKDOWN_MAX_YEARS
        assert math.isfinite(result.maturity_value)
        assert result.maturity_value > result.total_contributions

    def test_ppf_long_tenure(self):
        """A tiny rate over a huge term keeps the headline and lists a century."""
        result = compute_annual_deposit_growth(1000, 0.000000001, 10 ** 12)

        assert len(result.yearly) == BREAKDOWN_MAX_YEARS
        assert math.isfinite(result.maturity_value)
        assert result.total_contributions == 1000 * 10 ** 12

    def test_compound_interest_long_tenure(self):
        result = compute_compound_interest(1000, 0.000000000001, 1000000000000, 1)

        assert len(result.yearly) == BREAKDOWN_MAX_YEARS
        assert math.isfinite(result.maturity_value)

    def test_withdrawals_sustained_past_listed_years(self):
        result = simulate_withdrawals(1000000, 5000, 12, 12 * 150)

        assert len(result.yearly) == BREAKDOWN_MAX_YEARS
        assert result.exhausted_year is None
        assert result.total_withdrawn == 5000 * 12 * 150
        assert result.remaining_balance > 1000000

    def test_withdrawals_exhausted_past_listed_years(self):
        result = simulate_withdrawals(1500000, 1000, 0, 12 * 200)

        assert len(result.yearly) == BREAKDOWN_MAX_YEARS
        assert result.total_withdrawn == 1500000
        assert result.remaining_balance == 0
        assert result.exhausted_year == 125

    def test_withdrawals_past_listed_years_match_monthly_simulation(self):
        r = periodic_rate(6)
        balance, withdrawn, month = 2000000.0, 0.0, 0
        while month < 12 * 150:
            month += 1
            balance *= 1 + r
            if balance >= 10020:
                balance -= 10020
                withdrawn += 10020
            else:
                withdrawn += balance
                balance = 0.0
                break

        result = simulate_withdrawals(2000000, 10020, 6, 12 * 150)

        assert month > BREAKDOWN_MAX_YEARS * 12
        assert result.exhausted_year == math.ceil(month / 12)
        assert abs(result.total_withdrawn - withdrawn) < 1
        assert result.remaining_balance == 0

    def test_pension_plan(self):
        """NPS: 40% of the corpus buys the annuity, the rest is paid out."""
        corpus = compute_periodic_growth(5000, 10, 360).maturity_value
        result = compute_pension_plan(5000, 10, 360, 6)

        assert abs(result.maturity_value - corpus) < 1e-6
        assert abs(result.annuity_amount - corpus * 0.4) < 1e-6
        assert abs(result.lump_sum_withdrawal - corpus * 0.6) < 1e-6
        assert abs(result.monthly_pension - corpus * 0.4 * 0.005) < 1e-6
        assert result.total_contributions == 5000 * 360

    def test_pension_plan_incomplete_inputs(self):
        assert compute_pension_plan(0, 10, 360, 6) is None
        assert compute_pension_plan(5000, 10, 0, 6) is None

    def test_provident_fund(self):
        """Two years of 24% contributions with a 5% raise at 8.5%."""
        result = compute_provident_fund(20000, 2, 12, 12, 5, 8.5)

        assert abs(result.total_contributions - 118080) < 1e-6
        assert abs(result.total_employee_contribution - 59040) < 1e-6
        assert abs(result.total_employer_contribution - 59040) < 1e-6
        assert abs(result.maturity_value - 133428.96) < 0.01
        assert result.yearly[0]["balance"] == 62496
        assert result.yearly[-1]["balance"] == 133429
        assert result.years == 2

    def test_provident_fund_zero_rate(self):
        result = compute_provident_fund(10000, 3, 12, 12, 0, 0)
        assert abs(result.maturity_value - 86400) < 1e-6
        assert abs(result.total_interest) < 1e-6

    def test_provident_fund_long_career(self):
        result = compute_provident_fund(20000, 10 ** 6, 12, 12, 0, 0)
        assert len(result.yearly) == BREAKDOWN_MAX_YEARS
        assert abs(result.total_contributions - 57600 * 10 ** 6) < 1

    def test_provident_fund_incomplete_inputs(self):
        assert compute_provident_fund(0, 10, 12, 12) is None
        assert compute_provident_fund(20000, 0, 12, 12) is None
        assert compute_provident_fund(20000, 10, 0, 0) is None

    def test_daily_interest(self):
        simple = compute_daily_interest(100000, 7.3, 30)
        assert abs(simple.daily_rate_percent - 0.02) < 1e-9
        assert abs(simple.daily_interest - 20) < 1e-9
        assert abs(simple.total_interest - 600) < 1e-9
        assert abs(simple.effective_rate - 0.6) < 1e-9

        compound = compute_daily_interest(100000, 7.3, 30, compound=True)
        assert compound.total_interest > simple.total_interest
        assert abs(compound.final_amount - 100000 * 1.0002 ** 30) < 1e-6

    def test_savings_goal(self):
        result = compute_savings_goal(120000, 20000, 10)

        assert result.remaining_amount == 100000
        assert result.monthly_savings_needed == 10000
        assert abs(result.weekly_savings_needed - 2307.69) < 0.01
        assert abs(result.daily_savings_needed - 328.77) < 0.01
        assert abs(result.progress_percent - 16.67) < 0.01
        assert not result.goal_reached

    def test_savings_goal_with_interest(self):
        """With a rate the monthly figure is the reverse recurring deposit."""
        result = compute_savings_goal(100000, 0, 12, 12)
        expected = compute_required_deposit(100000, 12, 12).periodic_amount
        assert abs(result.monthly_savings_needed - expected) < 1e-6

    def test_savings_goal_already_reached(self):
        result = compute_savings_goal(100000, 150000, 12)
        assert result.goal_reached
        assert result.monthly_savings_needed == 0
        assert result.progress_percent == 100


class TestRatios:
    """Test the small closed-form calculators."""

    def test_simple_interest(self):
        result = compute_simple_interest(10000, 10, 2)
        assert result.simple_interest == 2000
        assert result.amount == 12000
        assert [row["amount"] for row in result.yearly] == [11000, 12000]

    def test_simple_interest_breakdown_capped(self):
        result = compute_simple_interest(10000, 5, 25)
        assert len(result.yearly) == 20

    def test_cagr(self):
        result = compute_cagr(100, 121, 2)
        assert abs(result.cagr_percent - 10) < 1e-9
        assert result.total_return == 21
        assert abs(result.total_return_percent - 21) < 1e-9

    def test_roi(self):
        assert compute_roi(100, 150) == {"roi_percent": 50, "net_profit": 50}
        assert compute_roi(0, 150) is None

    def test_tip(self):
        result = compute_tip(1000, 10, 4)
        assert result.tip_amount == 100
        assert result.total_amount == 1100
        assert result.per_person_total == 275

    def test_bill_split_custom_shares(self):
        """Custom shares are paid first; the rest is split evenly."""
        result = compute_bill_split(1000, 4, tip_percent=10, custom_shares=[300])
        assert result.total_with_tip == 1100
        assert result.remaining_amount == 800
        assert result.remaining_people == 3
        assert abs(result.per_person_remaining - 266.67) < 0.01

    def test_bill_split_tip_amount_overrides_percent(self):
        result = compute_bill_split(1000, 2, tip_percent=20, tip_amount=50)
        assert result.tip_amount == 50
        assert result.tip_percent == 5

    def test_bill_split_everyone_custom(self):
        result = compute_bill_split(1000, 2, custom_shares=[600, 400])
        assert result.remaining_people == 0
        assert result.per_person_remaining == 0

    def test_stacked_discount(self):
        result = compute_discount(1000, 20, 10, 18)
        assert result.discount_amount == 200
        assert result.additional_discount_amount == 80
        assert result.price_after_discount == 720
        assert abs(result.final_price - 849.6) < 1e-9
        assert result.total_savings == 280
        assert abs(result.savings_percent - 28) < 1e-9

    def test_gratuity_covered(self):
        result = compute_gratuity(50000, 10)
        assert result.is_eligible
        assert abs(result.gratuity_amount - 50000 * 15 * 10 / 26) < 1e-6
        assert result.taxable_amount == 0

    def test_gratuity_covered_cap(self):
        result = compute_gratuity(500000, 30)
        assert result.gratuity_amount == 2000000

    def test_gratuity_not_covered(self):
        result = compute_gratuity(500000, 10, covered=False)
        assert result.gratuity_amount == 2500000
        assert result.tax_free_amount == 1000000
        assert result.taxable_amount == 1500000

    def test_gratuity_under_five_years(self):
        result = compute_gratuity(50000, 4, 11)
        assert not result.is_eligible
        assert result.gratuity_amount == 0

    def test_inflation(self):
        result = compute_inflation(100, 10, 2)
        assert abs(result.future_value - 121) < 1e-9
        assert abs(result.real_value - 82.6446) < 0.001
        assert len(result.yearly) == 2

    def test_stock_average(self):
        """Lots without a quantity are ignored."""
        result = compute_stock_average([(10, 100), (0, 500), (10, 120)], 130)

        assert result.total_quantity == 20
        assert result.total_investment == 2200
        assert result.average_price == 110
        assert result.current_value == 2600
        assert result.profit_loss == 400
        assert abs(result.profit_loss_percent - 18.18) < 0.01

    def test_stock_average_needs_an_investment(self):
        assert compute_stock_average([], 130) is None
        assert compute_stock_average([(10, 0)], 130) is None
