from decimal import Decimal

from dealcalc.engine.debt import monthly_payment, annual_schedule


class TestMonthlyPayment:
    def test_standard_loan(self):
        """$400K at 7% for 30 years."""
        pmt = monthly_payment(Decimal("400000"), Decimal("7"), 30)
        # Expected: ~$2,661.21
        assert pmt.quantize(Decimal("0.01")) == Decimal("2661.21")

    def test_zero_rate_is_straight_line(self):
        pmt = monthly_payment(Decimal("400000"), Decimal("0"), 5)
        assert pmt == Decimal("400000") / 60

    def test_zero_rate_even_split(self):
        pmt = monthly_payment(Decimal("360000"), Decimal("0"), 30)
        assert pmt == Decimal("1000")

    def test_zero_principal(self):
        pmt = monthly_payment(Decimal("0"), Decimal("5.5"), 5)
        assert pmt == Decimal("0")

    def test_higher_rate_higher_payment(self):
        low = monthly_payment(Decimal("400000"), Decimal("4"), 10)
        high = monthly_payment(Decimal("400000"), Decimal("9"), 10)
        assert high > low


class TestAnnualSchedule:
    def test_zero_rate_fully_amortizes(self):
        schedule = annual_schedule(Decimal("400000"), Decimal("0"), 5)
        assert len(schedule) == 5
        assert sum(y.principal for y in schedule) == Decimal("400000")
        assert schedule[-1].balance == Decimal("0")

    def test_zero_rate_level_principal(self):
        schedule = annual_schedule(Decimal("400000"), Decimal("0"), 5)
        for y in schedule:
            assert y.principal == Decimal("80000.00")
            assert y.interest == Decimal("0")

    def test_first_year_interest_on_opening_balance(self):
        schedule = annual_schedule(Decimal("400000"), Decimal("5.5"), 5)
        # 400000 * 5.5% = 22000
        assert schedule[0].interest == Decimal("22000.00")
        assert schedule[0].payment == schedule[0].principal + schedule[0].interest

    def test_balance_decreases(self):
        schedule = annual_schedule(Decimal("400000"), Decimal("5.5"), 5)
        for i in range(1, len(schedule)):
            assert schedule[i].balance < schedule[i - 1].balance

    def test_annual_interest_leaves_residual_at_term(self):
        """Charging a full year of interest on the opening balance outpaces monthly amortization."""
        schedule = annual_schedule(Decimal("400000"), Decimal("5.5"), 5)
        assert len(schedule) == 5
        assert schedule[-1].balance > 0

    def test_early_payoff_stops_schedule(self):
        """Payment sized over 3 years, projected over 5: retired in year 4."""
        schedule = annual_schedule(Decimal("400000"), Decimal("5.5"), 3, horizon_years=5)
        assert 3 < len(schedule) < 5
        assert schedule[-1].balance == Decimal("0")

    def test_zero_principal_empty(self):
        assert annual_schedule(Decimal("0"), Decimal("5.5"), 5) == []

    def test_principal_never_exceeds_balance(self):
        schedule = annual_schedule(Decimal("100000"), Decimal("12"), 2, horizon_years=10)
        opening = Decimal("100000")
        for y in schedule:
            assert y.principal <= opening
            opening = y.balance
