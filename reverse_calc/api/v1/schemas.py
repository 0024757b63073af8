"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from reverse_calc.domain.models import DealSettings, EarlyPayTier, Position, PositionWithDays


class PositionSchema(BaseModel):
    """Existing funder position as stored by the calculator UI"""

    id: int
    entity: str = ""
    balance: Optional[float] = Field(None, ge=0, description="Remaining balance; null = unknown")
    daily_payment: float = Field(0.0, ge=0)
    is_our_position: bool = False
    include_in_reverse: bool = True
    funded_date: Optional[date] = None
    amount_funded: Optional[float] = Field(None, ge=0)

    def to_domain(self) -> Position:
        return Position(**self.model_dump())


class EarlyPayTierSchema(BaseModel):
    days_after_falloff: int = Field(..., ge=0)
    discount_percent: float = Field(..., ge=0, le=1)


class DealSettingsSchema(BaseModel):
    """Deal-level settings; fractions are 0-1 (0.30 = 30%)"""

    daily_payment_decrease: float = Field(0.30, ge=0, le=1)
    term_days: Optional[int] = Field(None, ge=0)
    daily_payment_override: Optional[float] = Field(None, ge=0)
    fee_percent: float = Field(0.09, ge=0, le=1)
    fee_schedule: Literal["average", "upfront"] = "average"
    rate: float = Field(1.499, gt=0)
    new_money: float = Field(0.0, ge=0)
    broker_commission: float = Field(0.0, ge=0, le=1)
    early_pay_options: List[EarlyPayTierSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def upfront_fee_requires_no_new_money(self) -> "DealSettingsSchema":
        if self.fee_schedule == "upfront" and self.new_money > 0:
            raise ValueError("Upfront fee schedule is not available when new money is added")
        return self

    def to_domain(self) -> DealSettings:
        data = self.model_dump(exclude={"early_pay_options"})
        return DealSettings(
            **data,
            early_pay_options=[EarlyPayTier(**t.model_dump()) for t in self.early_pay_options],
        )


class ProposalRequest(BaseModel):
    """Request body for POST /v1/proposal"""

    positions: List[PositionSchema] = Field(default_factory=list)
    settings: DealSettingsSchema = Field(default_factory=DealSettingsSchema)
    monthly_revenue: float = Field(0.0, ge=0)
    as_of: Optional[date] = Field(None, description="Evaluation date for funded-date balances (default: today)")


class BreakdownRequest(ProposalRequest):
    """Request body for POST /v1/proposal/breakdown"""

    day: int = Field(..., ge=1)


class AttributesModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class DiscrepancySchema(AttributesModel):
    position_id: int
    entity: str
    manual_balance: float
    auto_balance: float
    difference: float


class PositionWithDaysSchema(BaseModel):
    id: int
    entity: str
    balance: Optional[float]
    balance_known: bool
    daily_payment: float
    is_our_position: bool
    include_in_reverse: bool
    included: bool
    days_left: int
    payoff_date: Optional[date] = None
    discrepancy: Optional[DiscrepancySchema] = None

    @classmethod
    def from_domain(cls, p: PositionWithDays) -> "PositionWithDaysSchema":
        return cls(
            id=p.id,
            entity=p.entity,
            balance=p.effective_balance,
            balance_known=p.balance_known,
            daily_payment=p.daily_payment,
            is_our_position=p.position.is_our_position,
            include_in_reverse=p.position.include_in_reverse,
            included=p.included,
            days_left=p.days_left,
            payoff_date=p.payoff_date,
            discrepancy=DiscrepancySchema.model_validate(p.discrepancy) if p.discrepancy else None,
        )


class DayScheduleSchema(AttributesModel):
    day: int
    week: int
    cash_infusion: float
    daily_withdrawal: float
    exposure_on_reverse: float
    rtr_balance: float


class WeekScheduleSchema(AttributesModel):
    week: int
    cash_infusion: float
    total_debits: float
    end_exposure: float


class DealTermsSchema(AttributesModel):
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


class DealMetricsSchema(AttributesModel):
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


class PayoffTimelineSchema(AttributesModel):
    entity: str
    balance: float
    daily_payment: float
    days_until_payoff: int
    payoff_date: Optional[date] = None


class WeeklyCashFlowSchema(AttributesModel):
    week: int
    weekly_credits: float
    your_payment: float
    net_cash_flow: float
    cumulative_savings: float
    active_positions: int
    falloff_entities: List[str]


class MilestonesSchema(AttributesModel):
    month_1: float
    month_3: float
    to_payoff: float


class CrossoverSchema(AttributesModel):
    crossover_week: Optional[int]
    peak_week: int
    peak_accumulated_cash: float
    positions_cleared: int
    debt_cleared: float


class FalloffSchema(AttributesModel):
    falloff_day: int
    cash_accumulated: float
    balance_with_us: float
    days_remaining_after_falloff: int


class EarlyPayoffSchema(AttributesModel):
    days_after_falloff: int
    discount_percent: float
    payoff_deadline: int
    balance_at_deadline: float
    payoff_amount: float
    savings: float
    available: bool


class SavingsSchema(AttributesModel):
    timeline: List[PayoffTimelineSchema]
    weekly: List[WeeklyCashFlowSchema]
    milestones: MilestonesSchema
    crossover: CrossoverSchema
    falloff: FalloffSchema
    early_payoff_options: List[EarlyPayoffSchema]


class DayOneSchema(AttributesModel):
    cash_infused: float
    origination_fee: float
    fee_percent: float
    gross_contract: float
    factor_rate: float
    day_one_rtr: float
    fee_label: str


class ProposalResponse(BaseModel):
    """Response for POST /v1/proposal"""

    daily_schedule: List[DayScheduleSchema]
    weekly_schedule: List[WeekScheduleSchema]
    positions_with_days: List[PositionWithDaysSchema]
    terms: DealTermsSchema
    metrics: DealMetricsSchema
    savings: SavingsSchema
    day_one: Optional[DayOneSchema] = None
    discrepancies: List[DiscrepancySchema]


class BreakdownEntrySchema(AttributesModel):
    entity: str
    daily_payment: float
    days_contributing: int
    total_contribution: float
    remaining_balance: float
    total_days_left: int
    is_new_money: bool


class BreakdownResponse(AttributesModel):
    """Response for POST /v1/proposal/breakdown"""

    day: int
    entries: List[BreakdownEntrySchema]
    total: float
