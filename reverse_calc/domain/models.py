"""Domain models - pure Python dataclasses representing deal inputs and derived schedules"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class Position:
    """Existing funder's advance against the merchant"""

    id: int
    entity: str
    balance: Optional[float]  # None = unknown
    daily_payment: float
    is_our_position: bool = False
    include_in_reverse: bool = True
    funded_date: Optional[date] = None
    amount_funded: Optional[float] = None


@dataclass
class EarlyPayTier:
    """Discount on the remaining balance if paid off within N days after falloff"""

    days_after_falloff: int
    discount_percent: float


@dataclass
class DealSettings:
    """Deal-level parameters, one set per calculation"""

    daily_payment_decrease: float = 0.30
    term_days: Optional[int] = None
    daily_payment_override: Optional[float] = None
    fee_percent: float = 0.09
    fee_schedule: str = "average"  # "average" or "upfront"
    rate: float = 1.499
    new_money: float = 0.0
    broker_commission: float = 0.0
    early_pay_options: List[EarlyPayTier] = field(default_factory=list)


@dataclass
class BalanceDiscrepancy:
    """Manual balance disagrees with the balance derived from funding provenance"""

    position_id: int
    entity: str
    manual_balance: float
    auto_balance: float

    @property
    def difference(self) -> float:
        return self.manual_balance - self.auto_balance


@dataclass
class PositionWithDays:
    """Position annotated with its effective balance and payoff timing"""

    position: Position
    effective_balance: Optional[float]
    days_left: int
    included: bool
    payoff_date: Optional[date] = None
    discrepancy: Optional[BalanceDiscrepancy] = None

    @property
    def id(self) -> int:
        return self.position.id

    @property
    def entity(self) -> str:
        return self.position.entity

    @property
    def daily_payment(self) -> float:
        return self.position.daily_payment

    @property
    def balance_known(self) -> bool:
        return self.effective_balance is not None


@dataclass
class PositionStatus:
    """Position balance as of a given schedule day or week"""

    entity: str
    daily_payment: float
    remaining_balance: float
    days_left: int
    weeks_left: int
    percent_paid: float


@dataclass
class DealTerms:
    """Resolved funding amounts and the authoritative new payment terms"""

    included_balance: float
    total_advance_amount: float
    total_funding: float
    net_advance: float
    consolidation_fees: float
    base_payback: float
    included_daily_payment: float
    new_daily_payment: float
    number_of_debits: int
    total_payback: float


@dataclass(frozen=True)
class DaySchedule:
    """One simulated business day"""

    day: int
    week: int
    cash_infusion: float
    daily_withdrawal: float
    exposure_on_reverse: float
    rtr_balance: float


@dataclass(frozen=True)
class WeekSchedule:
    """Rollup of up to five consecutive simulated days"""

    week: int
    cash_infusion: float
    total_debits: float
    end_exposure: float


@dataclass
class BreakdownEntry:
    """One source of a pay day's cash infusion"""

    entity: str
    daily_payment: float
    days_contributing: int
    total_contribution: float
    remaining_balance: float
    total_days_left: int
    is_new_money: bool = False


@dataclass
class CashInfusionBreakdown:
    day: int
    entries: List[BreakdownEntry]
    total: float


@dataclass
class DayOneSummary:
    """Day 1 contract formation: (cash + fee) x rate = RTR"""

    cash_infused: float
    origination_fee: float
    fee_percent: float
    gross_contract: float
    factor_rate: float
    day_one_rtr: float
    fee_label: str


@dataclass
class DealMetrics:
    """Summary metrics derived from the simulated schedule"""

    total_days: int
    max_exposure: float
    max_exposure_day: int
    last_day_exposed: int
    percent_days_in_red: float
    total_cash_infusion: float
    actual_payback_collected: float
    profit: float
    deal_true_factor: float
    total_current_daily_payment_all: float
    current_leverage: float
    new_leverage: float
    new_weekly_payment: float
    daily_savings: float
    weekly_savings: float
    monthly_savings: float
    reduction_percent: float
    broker_commission_amount: float
    profit_after_commission: float


@dataclass
class PayoffTimelineEntry:
    entity: str
    balance: float
    daily_payment: float
    days_until_payoff: int
    payoff_date: Optional[date] = None


@dataclass
class WeeklyCashFlow:
    """Merchant-facing cash flow for one week of the deal"""

    week: int
    weekly_credits: float
    your_payment: float
    net_cash_flow: float
    cumulative_savings: float
    active_positions: int
    falloff_entities: List[str] = field(default_factory=list)


@dataclass
class SavingsMilestones:
    month_1: float
    month_3: float
    to_payoff: float


@dataclass
class CrossoverPoint:
    """First week the new payment exceeds the old collections"""

    crossover_week: Optional[int]  # None = net cash flow never turns negative
    peak_week: int
    peak_accumulated_cash: float
    positions_cleared: int
    debt_cleared: float


@dataclass
class FalloffSummary:
    """Where the merchant stands once every consolidated position has cleared"""

    falloff_day: int
    cash_accumulated: float
    balance_with_us: float
    days_remaining_after_falloff: int


@dataclass
class EarlyPayoffOption:
    days_after_falloff: int
    discount_percent: float
    payoff_deadline: int
    balance_at_deadline: float
    payoff_amount: float
    savings: float
    available: bool


@dataclass
class SavingsProjection:
    timeline: List[PayoffTimelineEntry]
    weekly: List[WeeklyCashFlow]
    milestones: SavingsMilestones
    crossover: CrossoverPoint
    falloff: FalloffSummary
    early_payoff_options: List[EarlyPayoffOption] = field(default_factory=list)


@dataclass
class ProposalResult:
    """Everything the rendering layer needs for one calculation"""

    daily_schedule: List[DaySchedule]
    weekly_schedule: List[WeekSchedule]
    positions_with_days: List[PositionWithDays]
    terms: DealTerms
    metrics: DealMetrics
    savings: SavingsProjection
    day_one: Optional[DayOneSummary]
    discrepancies: List[BalanceDiscrepancy] = field(default_factory=list)
