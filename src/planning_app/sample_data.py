from __future__ import annotations

from .models.capex import CapexPayment
from .models.common import PaymentTerm, Quarter, ScenarioMeta, SeasonalPattern, TimeframeSettings
from .models.costs import EvolutionType, Expense, ExpenseCategory, ExpenseStep, OneOffFlow, VariableCharge
from .models.funding import FundingRound, Loan
from .models.headcount import Department, Role
from .models.income import IncomeStatementSettings
from .models.products import BomCost, BomEntry, ComponentReference, ManualCost, Product, ProductCategory, SalesChannel
from .models.scenario import ScenarioInput, TreasurySettings
from .models.valuation import (
    BerkusParams,
    DilutionSettings,
    ExitScenario,
    HistoricalYear,
    RiskFactorParams,
    ScorecardParams,
    ValuationSettings,
)


def build_sample_scenario() -> ScenarioInput:
    components = [
        ComponentReference(
            id="pcb",
            name="Main board",
            supplier="Eurocircuits",
            prices={50: 42.0, 100: 36.0, 200: 31.0, 500: 26.0, 1000: 22.0, 2000: 19.0, 5000: 16.5, 10000: 15.0},
        ),
        ComponentReference(
            id="enclosure",
            name="Aluminium enclosure",
            supplier="Protolabs",
            prices={50: 28.0, 100: 24.0, 200: 20.0, 500: 17.0, 1000: 14.0, 2000: 12.0, 5000: 10.0, 10000: 9.0},
        ),
        ComponentReference(
            id="sensor",
            name="Optical sensor",
            supplier="ams OSRAM",
            prices={50: 12.0, 100: 11.0, 200: 10.0, 500: 9.0, 1000: 8.0, 2000: 7.5, 5000: 7.0, 10000: 6.5},
        ),
    ]

    products = [
        Product(
            id="sensor-kit",
            name="Sensor Kit",
            category=ProductCategory.B2C,
            launch_year=2025,
            launch_month=3,
            unit_price=249.0,
            volumes_by_year={2025: 400, 2026: 1200, 2027: 2500, 2028: 4200, 2029: 6000},
            cost=BomCost(
                entries=[
                    BomEntry(component_id="pcb", quantity=1),
                    BomEntry(component_id="enclosure", quantity=1),
                    BomEntry(component_id="sensor", quantity=2),
                ],
            ),
            dev_cost=120000.0,
            capex_schedule=[
                CapexPayment(year=2025, month=1, percentage_of_total=50),
                CapexPayment(year=2025, month=6, percentage_of_total=50),
            ],
        ),
        Product(
            id="fleet-gateway",
            name="Fleet Gateway",
            category=ProductCategory.B2B,
            launch_year=2026,
            unit_price=890.0,
            channel_prices={SalesChannel.WHOLESALE: 790.0, SalesChannel.OEM: 690.0},
            volumes_by_channel={
                SalesChannel.WHOLESALE: {2026: 150, 2027: 400, 2028: 700, 2029: 1000},
                SalesChannel.OEM: {2027: 200, 2028: 500, 2029: 900},
            },
            cost=ManualCost(unit_cost=310.0),
            dev_cost=180000.0,
        ),
    ]

    roles = [
        Role(id="cto", title="CTO", department=Department.RND, start_year=2025, annual_cost_loaded=95000),
        Role(id="hw-eng", title="Hardware engineer", department=Department.RND, start_year=2025, annual_cost_loaded=70000),
        Role(
            id="prod-lead",
            title="Production lead",
            department=Department.PRODUCTION,
            start_year=2026,
            annual_cost_loaded=55000,
            linked_product_id="sensor-kit",
        ),
        Role(id="sales-b2b", title="Account executive", department=Department.SALES, start_year=2026, annual_cost_loaded=60000),
        Role(id="support", title="Support specialist", department=Department.SUPPORT, start_year=2027, annual_cost_loaded=42000),
    ]

    expenses = [
        Expense(
            id="office",
            name="Office rent",
            category=ExpenseCategory.GNA,
            start_year=2025,
            base_annual_cost=24000,
            evolution=EvolutionType.STEP,
            steps=[ExpenseStep(year=2027, new_annual_cost=48000)],
        ),
        Expense(
            id="marketing",
            name="Performance marketing",
            category=ExpenseCategory.SALES_MARKETING,
            start_year=2025,
            evolution=EvolutionType.PERCENTAGE_OF_REVENUE,
            revenue_ratio=0.08,
        ),
        Expense(
            id="shipping",
            name="Outbound shipping",
            category=ExpenseCategory.LOGISTICS,
            start_year=2025,
            evolution=EvolutionType.PER_UNIT,
            volume_ratio=6.5,
        ),
        Expense(
            id="tools",
            name="CAD and cloud tools",
            category=ExpenseCategory.IT_TOOLS,
            start_year=2025,
            base_annual_cost=9000,
            evolution=EvolutionType.GROWTH_RATE,
            growth_rate=0.05,
        ),
    ]

    treasury = TreasurySettings(
        revenue_seasonality=SeasonalPattern.from_variations(
            [-0.2, -0.2, -0.1, 0.0, 0.0, -0.1, -0.2, -0.3, 0.1, 0.2, 0.3, 0.5]
        ),
        cogs_payment_terms=[PaymentTerm(delay_months=0, percentage=30), PaymentTerm(delay_months=1, percentage=70)],
        variable_charges=[VariableCharge(name="Payment processing", rate_of_revenue=0.02)],
        other_inflows=[OneOffFlow(year=2025, month=9, amount=30000, label="Innovation grant")],
        other_outflows=[OneOffFlow(year=2026, month=4, amount=15000, label="CE certification")],
    )

    valuation = ValuationSettings(
        historical=[
            HistoricalYear(
                year=2024,
                revenue=60000,
                gross_margin_rate=0.45,
                payroll=40000,
                external_costs=12000,
                depreciation=2000,
            )
        ],
        scorecard=ScorecardParams(base_valuation=1_500_000, team=0.2, market=0.3, product=0.1, competition=-0.1),
        berkus=BerkusParams(
            sound_idea=450000,
            prototype=400000,
            quality_management=300000,
            strategic_relationships=200000,
            product_rollout=150000,
        ),
        risk_factor=RiskFactorParams(base_valuation=1_500_000, management_risk=1, technology=1, manufacturing=-1),
        dilution=DilutionSettings(
            total_raise=500000,
            exit_scenarios=[
                ExitScenario(name="Trade sale", year=2029, exit_multiple=8, probability=0.6),
                ExitScenario(name="Strategic buyer", year=2029, exit_multiple=12, probability=0.4),
            ],
        ),
    )

    return ScenarioInput(
        meta=ScenarioMeta(id="sample", name="Connected sensors", description="Hardware startup five-year plan"),
        timeframe=TimeframeSettings(start_year=2025, duration_years=5),
        initial_cash=150000,
        products=products,
        components=components,
        roles=roles,
        expenses=expenses,
        loans=[
            Loan(id="bpi", name="Innovation loan", principal=100000, annual_rate=0.04, term_months=48, start_year=2025, start_month=4)
        ],
        funding_rounds=[FundingRound(name="Seed", year=2025, quarter=Quarter.Q2, amount=500000, pre_money_valuation=1_800_000)],
        treasury=treasury,
        income=IncomeStatementSettings(
            financial_expense={2025: 3000, 2026: 2500, 2027: 1800, 2028: 1000},
            research_tax_credit={2025: 25000, 2026: 30000},
        ),
        valuation=valuation,
    )
