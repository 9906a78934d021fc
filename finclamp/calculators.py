"""
Calculator registry.

Every calculator screen is declared as configuration: a namespace for its
query parameters, the fields it accepts (with defaults and a validation
kind) and a formula tag selecting the kernel adapter that computes it.
Screens that share a formula (EMI, mortgage and personal loan, for example)
differ only in their declaration.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from finclamp.calculations import amortization, compounding, ratios, tax
from finclamp.calculations.parsing import (
    parse_amount,
    parse_amounts,
    parse_count,
    parse_pairs,
    sanitize_input,
)
from finclamp.config import get_settings
from finclamp.exceptions import UnknownCalculatorError, UnknownFieldError

logger = logging.getLogger(__name__)

ResultRecord = Dict
Formula = Callable[[Mapping[str, str]], Optional[ResultRecord]]

FIELD_KINDS = ("amount", "percent", "count", "choice", "amounts", "pairs")

FORMULAS: Dict[str, Formula] = {}


def formula(tag: str) -> Callable[[Formula], Formula]:
    """Register a kernel adapter under a formula tag."""

    def register(func: Formula) -> Formula:
        FORMULAS[tag] = func
        return func

    return register


@dataclass(frozen=True)
class FieldSpec:
    """One declared input of a calculator."""

    name: str
    default: str = ""
    kind: str = "amount"
    choices: Tuple[str, ...] = ()

    def clean(self, value: Optional[str]) -> str:
        """
        Apply the field's validation rule to a raw value.

        Numeric kinds drop anything that is not a digit, decimal point or
        grouping comma. List kinds clean each entry (and each half of a
        "first:second" pair) the same way. Choice fields fall back to the
        default for values outside ``choices``.
        """
        text = "" if value is None else str(value).strip()
        if self.kind == "choice":
            return text if text in self.choices else self.default
        if self.kind == "amounts":
            parts = (sanitize_input(part) for part in text.split(";"))
            return ";".join(part for part in parts if part)
        if self.kind == "pairs":
            pairs = (
                ":".join(sanitize_input(half) for half in part.split(":", 1))
                for part in text.split(";")
            )
            return ";".join(pair for pair in pairs if pair.strip(":"))
        return sanitize_input(text)


@dataclass(frozen=True)
class CalculatorSchema:
    """Declared configuration of a calculator screen."""

    calculator_id: str
    namespace: str
    title: str
    formula: str
    fields: Tuple[FieldSpec, ...]

    @property
    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]

    def defaults(self) -> Dict[str, str]:
        return {spec.name: spec.default for spec in self.fields}

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise UnknownFieldError(self.calculator_id, name)

    def validate_field(self, name: str, value: Optional[str]) -> str:
        return self.get_field(name).clean(value)

    def compute(self, fields: Mapping[str, str]) -> Optional[ResultRecord]:
        """
        Run the kernel for a field map.

        Returns None when the kernel skips the computation, when the inputs
        push a kernel out of floating-point or calendar range, or when any
        number in its result is not finite, so a record is never partial.
        """
        values = self.defaults()
        values.update({k: v for k, v in fields.items() if k in values})

        try:
            result = FORMULAS[self.formula](values)
        except (ArithmeticError, ValueError) as e:
            logger.debug(f"{self.calculator_id}: inputs out of range: {e}")
            return None

        if result is None:
            logger.debug(f"{self.calculator_id}: no result for current inputs")
            return None
        if not _all_finite(result):
            logger.debug(f"{self.calculator_id}: discarded non-finite result")
            return None
        return result


def _all_finite(value) -> bool:
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return True
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, dict):
        return all(_all_finite(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return all(_all_finite(v) for v in value)
    return True


def _record(result) -> Optional[ResultRecord]:
    return result.as_dict() if result is not None else None


def _tenure_months(fields: Mapping[str, str], key: str = "tenure") -> float:
    return parse_amount(fields[key]) * 12


# ============================================================================
# FORMULA ADAPTERS
# ============================================================================


@formula("amortization")
def _amortization(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    rate = parse_amount(fields["interestRate"])
    months = _tenure_months(fields)
    if fields["calculationType"] == "reverse-emi":
        return _record(
            amortization.compute_reverse_amortization(
                parse_amount(fields["emi"]), rate, months
            )
        )

    principal = parse_amount(fields["loanAmount"])
    result = amortization.compute_amortization(principal, rate, months)
    if result is None:
        return None
    record = result.as_dict()
    record["yearly"] = amortization.summarize_by_year(
        amortization.generate_amortization_schedule(principal, rate, months)
    )
    return record


@formula("income-tax")
def _income_tax(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        tax.compute_income_tax(
            parse_amount(fields["annualIncome"]),
            regime=fields["taxRegime"],
            deductions=parse_amount(fields["deductions"]),
        )
    )


@formula("freelancer-tax")
def _freelancer_tax(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        tax.compute_freelancer_tax(
            parse_amount(fields["freelanceIncome"]),
            other_income=parse_amount(fields["otherIncome"]),
            business_expenses=parse_amount(fields["businessExpenses"]),
            deductions=parse_amount(fields["deductions"]),
            professional_tax=parse_amount(fields["professionalTax"]),
            regime=fields["taxRegime"],
        )
    )


@formula("recurring-deposit")
def _recurring_deposit(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    rate = parse_amount(fields["interestRate"])
    months = _tenure_months(fields, "timePeriod")
    if fields["calculationType"] == "reverse-maturity":
        return _record(
            compounding.compute_required_deposit(
                parse_amount(fields["maturityAmount"]), rate, months
            )
        )

    deposit = parse_amount(fields["monthlyDeposit"])
    result = compounding.compute_periodic_growth(deposit, rate, months)
    if result is None:
        return None
    record = result.as_dict()
    record["yearly"] = compounding.compute_yearly_breakdown(deposit, rate, months)
    return record


@formula("sip")
def _sip(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    rate = parse_amount(fields["annualReturn"])
    months = parse_amount(fields["timePeriodYears"]) * 12 + parse_count(
        fields["timePeriodMonths"]
    )
    if fields["calculationType"] == "maturity":
        return _record(
            compounding.compute_required_deposit(
                parse_amount(fields["maturityAmount"]), rate, months
            )
        )
    return _record(
        compounding.compute_step_up_growth(
            parse_amount(fields["monthlyInvestment"]),
            rate,
            months,
            parse_amount(fields["stepUpPercentage"]),
        )
    )


@formula("fixed-deposit")
def _fixed_deposit(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    rate = parse_amount(fields["interestRate"])
    years = parse_amount(fields["timePeriod"])
    frequency = parse_count(fields["compoundingFrequency"], default=1)
    if fields.get("calculationType") == "reverse-maturity":
        return _record(
            compounding.compute_required_principal(
                parse_amount(fields["maturityAmount"]), rate, years, frequency
            )
        )
    return _record(
        compounding.compute_compound_interest(
            parse_amount(fields["principal"]), rate, years, frequency
        )
    )


@formula("ppf")
def _ppf(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        compounding.compute_annual_deposit_growth(
            parse_amount(fields["annualDeposit"]),
            parse_amount(fields["interestRate"]),
            parse_count(fields["timePeriod"]),
        )
    )


@formula("swp")
def _swp(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        compounding.simulate_withdrawals(
            parse_amount(fields["initialInvestment"]),
            parse_amount(fields["monthlyWithdrawal"]),
            parse_amount(fields["annualReturn"]),
            parse_count(fields["withdrawalPeriodYears"]) * 12,
        )
    )


@formula("lump-sum")
def _lump_sum(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        compounding.compute_lump_sum_growth(
            parse_amount(fields["investment"]),
            parse_amount(fields["annualReturn"]),
            _tenure_months(fields, "timePeriod"),
        )
    )


@formula("simple-interest")
def _simple_interest(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        ratios.compute_simple_interest(
            parse_amount(fields["principal"]),
            parse_amount(fields["interestRate"]),
            parse_amount(fields["timePeriod"]),
        )
    )


@formula("cagr")
def _cagr(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    beginning = parse_amount(fields["beginningValue"])
    ending = parse_amount(fields["endingValue"])
    if fields["calculationType"] == "roi":
        return ratios.compute_roi(beginning, ending)
    return _record(
        ratios.compute_cagr(beginning, ending, parse_amount(fields["numberOfYears"]))
    )


@formula("tip")
def _tip(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        ratios.compute_tip(
            parse_amount(fields["billAmount"]),
            parse_amount(fields["tipPercent"]),
            parse_count(fields["numberOfPeople"], default=1),
        )
    )


@formula("bill-split")
def _bill_split(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    tip_amount = None
    if fields["tipMode"] == "amount":
        tip_amount = parse_amount(fields["tipAmount"])
    return _record(
        ratios.compute_bill_split(
            parse_amount(fields["totalBill"]),
            parse_count(fields["numberOfPeople"], default=1),
            tip_percent=parse_amount(fields["tipPercent"]),
            tip_amount=tip_amount,
            custom_shares=parse_amounts(fields["customShares"]),
        )
    )


@formula("discount")
def _discount(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        ratios.compute_discount(
            parse_amount(fields["originalPrice"]),
            parse_amount(fields["discountPercent"]),
            parse_amount(fields["additionalDiscount"]),
            parse_amount(fields["taxPercent"]),
        )
    )


@formula("gratuity")
def _gratuity(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        ratios.compute_gratuity(
            parse_amount(fields["lastDrawnSalary"]),
            parse_amount(fields["yearsOfService"]),
            parse_amount(fields["monthsOfService"]),
            covered=fields["organizationType"] == "covered",
        )
    )


@formula("inflation")
def _inflation(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        ratios.compute_inflation(
            parse_amount(fields["currentAmount"]),
            parse_amount(fields["inflationRate"]),
            parse_amount(fields["timePeriod"]),
        )
    )


def _years_to_retirement(fields: Mapping[str, str]) -> int:
    current_age = parse_count(fields["currentAge"])
    if current_age <= 0:
        return 0
    return parse_count(fields["retirementAge"]) - current_age


@formula("pension")
def _pension(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    years = _years_to_retirement(fields)
    if years <= 0:
        return None
    return _record(
        compounding.compute_pension_plan(
            parse_amount(fields["monthlyContribution"]),
            parse_amount(fields["expectedReturn"]),
            years * 12,
            parse_amount(fields["annuityReturn"]),
        )
    )


@formula("provident-fund")
def _provident_fund(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        compounding.compute_provident_fund(
            parse_amount(fields["basicSalary"]),
            _years_to_retirement(fields),
            parse_amount(fields["employeeContribution"]),
            parse_amount(fields["employerContribution"]),
            salary_growth_percent=parse_amount(fields["salaryIncrement"]),
            annual_rate_percent=parse_amount(fields["interestRate"]),
        )
    )


@formula("daily-interest")
def _daily_interest(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        compounding.compute_daily_interest(
            parse_amount(fields["principal"]),
            parse_amount(fields["annualRate"]),
            parse_count(fields["days"]),
            compound=fields["calculationType"] == "compound",
        )
    )


@formula("savings-goal")
def _savings_goal(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        compounding.compute_savings_goal(
            parse_amount(fields["goalAmount"]),
            parse_amount(fields["currentSavings"]),
            parse_count(fields["timePeriodMonths"]),
            parse_amount(fields["interestRate"]),
        )
    )


@formula("stock-average")
def _stock_average(fields: Mapping[str, str]) -> Optional[ResultRecord]:
    return _record(
        ratios.compute_stock_average(
            parse_pairs(fields["purchases"]), parse_amount(fields["currentPrice"])
        )
    )


# ============================================================================
# SCREEN DECLARATIONS
# ============================================================================

_LOAN_FIELDS = (
    FieldSpec("loanAmount"),
    FieldSpec("interestRate", kind="percent"),
    FieldSpec("tenure"),
    FieldSpec("emi"),
    FieldSpec("calculationType", "emi", "choice", ("emi", "reverse-emi")),
)

_TAX_REGIME = FieldSpec("taxRegime", "new", "choice", ("new", "old"))

_CALCULATORS: Tuple[CalculatorSchema, ...] = (
    CalculatorSchema("emi", "emi_", "EMI Calculator", "amortization", _LOAN_FIELDS),
    CalculatorSchema(
        "mortgage", "mortgage_", "Mortgage Calculator", "amortization", _LOAN_FIELDS
    ),
    CalculatorSchema(
        "personal-loan", "pl_", "Personal Loan Calculator", "amortization", _LOAN_FIELDS
    ),
    CalculatorSchema(
        "income-tax",
        "tax_",
        "Income Tax Calculator",
        "income-tax",
        (FieldSpec("annualIncome"), FieldSpec("deductions"), _TAX_REGIME),
    ),
    CalculatorSchema(
        "freelancer-tax",
        "ftax_",
        "Freelancer Tax Calculator",
        "freelancer-tax",
        (
            FieldSpec("freelanceIncome"),
            FieldSpec("otherIncome"),
            FieldSpec("businessExpenses"),
            FieldSpec("deductions"),
            FieldSpec("professionalTax"),
            _TAX_REGIME,
        ),
    ),
    CalculatorSchema(
        "rd",
        "rd_",
        "Recurring Deposit Calculator",
        "recurring-deposit",
        (
            FieldSpec("monthlyDeposit"),
            FieldSpec("interestRate", kind="percent"),
            FieldSpec("timePeriod"),
            FieldSpec("maturityAmount"),
            FieldSpec(
                "calculationType", "maturity", "choice", ("maturity", "reverse-maturity")
            ),
        ),
    ),
    CalculatorSchema(
        "sip",
        "sip_",
        "SIP Calculator",
        "sip",
        (
            FieldSpec("monthlyInvestment"),
            FieldSpec("maturityAmount"),
            FieldSpec("annualReturn", "12", "percent"),
            FieldSpec("timePeriodYears", "10"),
            FieldSpec("timePeriodMonths", "0", "count"),
            FieldSpec("stepUpPercentage", "0", "percent"),
            FieldSpec("calculationType", "monthly", "choice", ("monthly", "maturity")),
        ),
    ),
    CalculatorSchema(
        "fd",
        "fd_",
        "Fixed Deposit Calculator",
        "fixed-deposit",
        (
            FieldSpec("principal"),
            FieldSpec("interestRate", kind="percent"),
            FieldSpec("timePeriod"),
            FieldSpec("compoundingFrequency", "4", "choice", ("1", "2", "4", "12", "365")),
            FieldSpec("maturityAmount"),
            FieldSpec(
                "calculationType", "maturity", "choice", ("maturity", "reverse-maturity")
            ),
        ),
    ),
    CalculatorSchema(
        "ppf",
        "ppf_",
        "PPF Calculator",
        "ppf",
        (
            FieldSpec("annualDeposit"),
            FieldSpec("timePeriod", "15", "count"),
            FieldSpec("interestRate", "7.1", "percent"),
        ),
    ),
    CalculatorSchema(
        "swp",
        "swp_",
        "SWP Calculator",
        "swp",
        (
            FieldSpec("initialInvestment"),
            FieldSpec("monthlyWithdrawal"),
            FieldSpec("annualReturn", "12", "percent"),
            FieldSpec("withdrawalPeriodYears", "20", "count"),
        ),
    ),
    CalculatorSchema(
        "lump-sum",
        "ls_",
        "Lump Sum Calculator",
        "lump-sum",
        (
            FieldSpec("investment"),
            FieldSpec("annualReturn", "12", "percent"),
            FieldSpec("timePeriod", "10"),
        ),
    ),
    CalculatorSchema(
        "compound-interest",
        "ci_",
        "Compound Interest Calculator",
        "fixed-deposit",
        (
            FieldSpec("principal"),
            FieldSpec("interestRate", kind="percent"),
            FieldSpec("timePeriod"),
            FieldSpec("compoundingFrequency", "1", "choice", ("1", "2", "4", "12", "365")),
        ),
    ),
    CalculatorSchema(
        "simple-interest",
        "si_",
        "Simple Interest Calculator",
        "simple-interest",
        (
            FieldSpec("principal"),
            FieldSpec("interestRate", kind="percent"),
            FieldSpec("timePeriod"),
        ),
    ),
    CalculatorSchema(
        "cagr",
        "cagr_",
        "CAGR Calculator",
        "cagr",
        (
            FieldSpec("beginningValue"),
            FieldSpec("endingValue"),
            FieldSpec("numberOfYears"),
            FieldSpec("calculationType", "cagr", "choice", ("cagr", "roi")),
        ),
    ),
    CalculatorSchema(
        "tip-calculator",
        "tip_",
        "Tip Calculator",
        "tip",
        (
            FieldSpec("billAmount"),
            FieldSpec("tipPercent", "18", "percent"),
            FieldSpec("numberOfPeople", "1", "count"),
        ),
    ),
    CalculatorSchema(
        "bill-split",
        "split_",
        "Bill Split Calculator",
        "bill-split",
        (
            FieldSpec("totalBill"),
            FieldSpec("tipAmount"),
            FieldSpec("tipPercent", "15", "percent"),
            FieldSpec("tipMode", "amount", "choice", ("amount", "percent")),
            FieldSpec("numberOfPeople", "2", "count"),
            FieldSpec("customShares", kind="amounts"),
        ),
    ),
    CalculatorSchema(
        "discount",
        "disc_",
        "Discount Calculator",
        "discount",
        (
            FieldSpec("originalPrice"),
            FieldSpec("discountPercent", kind="percent"),
            FieldSpec("additionalDiscount", kind="percent"),
            FieldSpec("taxPercent", kind="percent"),
        ),
    ),
    CalculatorSchema(
        "gratuity",
        "grat_",
        "Gratuity Calculator",
        "gratuity",
        (
            FieldSpec("lastDrawnSalary"),
            FieldSpec("yearsOfService"),
            FieldSpec("monthsOfService"),
            FieldSpec(
                "organizationType", "covered", "choice", ("covered", "non-covered")
            ),
        ),
    ),
    CalculatorSchema(
        "inflation",
        "infl_",
        "Inflation Calculator",
        "inflation",
        (
            FieldSpec("currentAmount"),
            FieldSpec("inflationRate", "6", "percent"),
            FieldSpec("timePeriod"),
        ),
    ),
    CalculatorSchema(
        "nps",
        "nps_",
        "NPS Calculator",
        "pension",
        (
            FieldSpec("monthlyContribution"),
            FieldSpec("currentAge", kind="count"),
            FieldSpec("retirementAge", "60", "count"),
            FieldSpec("expectedReturn", "10", "percent"),
            FieldSpec("annuityReturn", "6", "percent"),
        ),
    ),
    CalculatorSchema(
        "epf",
        "epf_",
        "EPF Calculator",
        "provident-fund",
        (
            FieldSpec("basicSalary"),
            FieldSpec("currentAge", kind="count"),
            FieldSpec("retirementAge", "58", "count"),
            FieldSpec("employeeContribution", "12", "percent"),
            FieldSpec("employerContribution", "12", "percent"),
            FieldSpec("salaryIncrement", "5", "percent"),
            FieldSpec("interestRate", "8.5", "percent"),
        ),
    ),
    CalculatorSchema(
        "daily-interest",
        "daily_",
        "Daily Interest Calculator",
        "daily-interest",
        (
            FieldSpec("principal"),
            FieldSpec("annualRate", kind="percent"),
            FieldSpec("days", kind="count"),
            FieldSpec("calculationType", "simple", "choice", ("simple", "compound")),
        ),
    ),
    CalculatorSchema(
        "savings-goal",
        "goal_",
        "Savings Goal Calculator",
        "savings-goal",
        (
            FieldSpec("goalAmount"),
            FieldSpec("currentSavings"),
            FieldSpec("timePeriodMonths", "12", "count"),
            FieldSpec("interestRate", "0", "percent"),
        ),
    ),
    CalculatorSchema(
        "stock-average",
        "stock_",
        "Stock Average Calculator",
        "stock-average",
        (
            FieldSpec("purchases", kind="pairs"),
            FieldSpec("currentPrice"),
        ),
    ),
)


def _build_registry(
    schemas: Tuple[CalculatorSchema, ...], reserved: List[str]
) -> Dict[str, CalculatorSchema]:
    """
    Index schemas by id and check their namespaces.

    A namespace that is a prefix of another would let one calculator claim
    the other's query parameters, so that is rejected at import time.
    """
    registry: Dict[str, CalculatorSchema] = {}
    for schema in schemas:
        if schema.formula not in FORMULAS:
            raise ValueError(f"{schema.calculator_id}: unknown formula {schema.formula}")
        for spec in schema.fields:
            if spec.kind not in FIELD_KINDS:
                raise ValueError(f"{schema.calculator_id}.{spec.name}: bad kind {spec.kind}")
        for other in registry.values():
            if other.namespace.startswith(schema.namespace) or schema.namespace.startswith(
                other.namespace
            ):
                raise ValueError(
                    f"Namespace {schema.namespace} overlaps {other.namespace}"
                )
        if any(key.startswith(schema.namespace) for key in reserved):
            raise ValueError(f"Namespace {schema.namespace} shadows a reserved key")
        registry[schema.calculator_id] = schema
    return registry


CALCULATORS: Dict[str, CalculatorSchema] = _build_registry(
    _CALCULATORS, get_settings().reserved_params
)


def get_calculator(calculator_id: str) -> CalculatorSchema:
    try:
        return CALCULATORS[calculator_id]
    except KeyError:
        raise UnknownCalculatorError(calculator_id) from None


def list_calculators() -> List[CalculatorSchema]:
    return list(CALCULATORS.values())
