from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_FLOOR, ROUND_HALF_UP

from workbench.schemas.dscr import DSCRBand, DSCRBreakdown, InterestOnlyImpact

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0")
# Every loan type is sized on a 30-year schedule; there is no term input.
AMORTIZATION_TERM_MONTHS = 360
STRONG_THRESHOLD = Decimal("1.25")
ACCEPTABLE_THRESHOLD = Decimal("1.0")


def parse_amount(value) -> Decimal | None:
    """Best-effort conversion of form input to ``Decimal``.

    Accepts numbers and formatted strings such as ``"850,000"`` or
    ``"$4,500.00"``. Anything unparseable, blank, NaN or infinite is ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        cleaned = str(value).strip().replace(",", "").replace("$", "").replace("%", "")
        if not cleaned:
            return None
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return None
    if not amount.is_finite():
        return None
    return amount


def _amount_or_zero(value) -> Decimal:
    amount = parse_amount(value)
    return amount if amount is not None else ZERO


def round_ratio(value: Decimal) -> Decimal:
    """Round a ratio to cents with halves going toward positive infinity.

    ``-1.235`` becomes ``-1.23`` and ``1.235`` becomes ``1.24``, the same as the
    loan screen shows. Money amounts keep ``ROUND_HALF_UP``.
    """
    cents = (value * Decimal("100") + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return (cents / Decimal("100")).quantize(TWOPLACES)


def _monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    return annual_rate_percent / Decimal("1200")


def monthly_debt_service(loan_amount: Decimal, annual_rate_percent: Decimal, *, interest_only: bool) -> Decimal:
    if interest_only:
        return loan_amount * (annual_rate_percent / Decimal("100")) / Decimal("12")
    rate = _monthly_rate(annual_rate_percent)
    if rate == 0:
        return loan_amount / Decimal(AMORTIZATION_TERM_MONTHS)
    factor = (Decimal("1") + rate) ** AMORTIZATION_TERM_MONTHS
    return loan_amount * rate * factor / (factor - Decimal("1"))


def classify_dscr(dscr) -> DSCRBand:
    value = _amount_or_zero(dscr)
    if value >= STRONG_THRESHOLD:
        return DSCRBand.STRONG
    if value >= ACCEPTABLE_THRESHOLD:
        return DSCRBand.ACCEPTABLE
    return DSCRBand.BELOW_THRESHOLD


def _empty_breakdown(interest_only: bool) -> DSCRBreakdown:
    return DSCRBreakdown(
        interest_only=interest_only,
        term_months=AMORTIZATION_TERM_MONTHS,
        monthly_debt_service=ZERO,
        annual_debt_service=ZERO,
        annual_income=ZERO,
        annual_expenses=ZERO,
        noi=ZERO,
        dscr=ZERO,
        band=DSCRBand.BELOW_THRESHOLD,
    )


def build_dscr_breakdown(
    loan_amount,
    interest_rate,
    monthly_rent,
    annual_taxes=None,
    annual_insurance=None,
    annual_hoa=None,
    interest_only: bool = False,
) -> DSCRBreakdown:
    interest_only = bool(interest_only)
    principal = _amount_or_zero(loan_amount)
    rate = _amount_or_zero(interest_rate)
    rent = _amount_or_zero(monthly_rent)
    if not principal or not rate or not rent:
        return _empty_breakdown(interest_only)

    monthly = monthly_debt_service(principal, rate, interest_only=interest_only)
    annual_debt_service = monthly * Decimal("12")
    annual_income = rent * Decimal("12")
    annual_expenses = _amount_or_zero(annual_taxes) + _amount_or_zero(annual_insurance) + _amount_or_zero(annual_hoa)
    noi = annual_income - annual_expenses
    if annual_debt_service > 0:
        dscr = round_ratio(noi / annual_debt_service)
    else:
        dscr = ZERO

    return DSCRBreakdown(
        interest_only=interest_only,
        term_months=AMORTIZATION_TERM_MONTHS,
        monthly_debt_service=monthly.quantize(TWOPLACES, rounding=ROUND_HALF_UP),
        annual_debt_service=annual_debt_service.quantize(TWOPLACES, rounding=ROUND_HALF_UP),
        annual_income=annual_income.quantize(TWOPLACES, rounding=ROUND_HALF_UP),
        annual_expenses=annual_expenses.quantize(TWOPLACES, rounding=ROUND_HALF_UP),
        noi=noi.quantize(TWOPLACES, rounding=ROUND_HALF_UP),
        dscr=dscr,
        band=classify_dscr(dscr),
    )


def calculate_dscr(
    loan_amount,
    interest_rate,
    monthly_rent,
    annual_taxes=None,
    annual_insurance=None,
    annual_hoa=None,
    interest_only: bool = False,
) -> Decimal:
    """NOI over annual debt service, rounded to cents.

    Returns ``0`` instead of raising when the loan amount, rate or rent is
    missing, zero or not a number, so half-filled forms stay renderable.
    """
    return build_dscr_breakdown(
        loan_amount,
        interest_rate,
        monthly_rent,
        annual_taxes,
        annual_insurance,
        annual_hoa,
        interest_only,
    ).dscr


def interest_only_impact(
    loan_amount,
    interest_rate,
    monthly_rent,
    annual_taxes=None,
    annual_insurance=None,
    annual_hoa=None,
    *,
    interest_only: bool,
) -> InterestOnlyImpact:
    args = (loan_amount, interest_rate, monthly_rent, annual_taxes, annual_insurance, annual_hoa)
    previous = calculate_dscr(*args, interest_only=not interest_only)
    current = calculate_dscr(*args, interest_only=interest_only)
    return InterestOnlyImpact(
        interest_only=interest_only,
        previous_dscr=previous,
        dscr=current,
        delta=current - previous,
    )


def calculate_ltv(loan_amount, property_value) -> Decimal:
    principal = _amount_or_zero(loan_amount)
    value = _amount_or_zero(property_value)
    if value <= 0:
        return ZERO
    return (principal / value * Decimal("100")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
