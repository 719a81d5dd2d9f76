from buildings.building import Position
from buildings.treasury import Treasury
from simulation.context import create_context
from simulation.service_funding import ServiceFundingProcessor


def _context_with_services(sim_config, balance: int, count: int = 1):
    ctx = create_context(sim_config, treasury=Treasury(balance))
    services = []
    for _ in range(count):
        school = ctx.placement.create_pending("school", Position())
        ctx.registry.register(school)
        services.append(school)
    return ctx, services


def test_unaffordable_service_is_shut_down_without_charge(sim_config) -> None:
    """Cost 50 against a balance of 30: inactive, balance untouched."""
    ctx, (school,) = _context_with_services(sim_config, 30)

    result = ctx.funding.process_daily_costs()

    assert school.active is False
    assert ctx.treasury.balance == 30
    assert result.shutdown_ids == [school.unique_id]
    assert result.total_cost == 0
    assert result.all_paid is False


def test_services_are_paid_in_registration_order(sim_config) -> None:
    ctx, (first, second) = _context_with_services(sim_config, 60, count=2)

    result = ctx.funding.process_daily_costs()

    assert first.active is True
    assert second.active is False
    assert ctx.treasury.balance == 10
    assert result.active_services == 1
    assert result.shutdown_services == 1
    assert ctx.funding.active_service_count() == 1


def test_shut_down_service_reactivates_when_funds_return(sim_config) -> None:
    ctx, (school,) = _context_with_services(sim_config, 0)

    ctx.funding.process_daily_costs()
    assert ctx.funding.is_service_active(school) is False

    ctx.treasury.add(75)
    result = ctx.funding.process_daily_costs()

    assert ctx.funding.is_service_active(school) is True
    assert result.all_paid is True
    assert ctx.treasury.balance == 25


def test_new_service_counts_as_active_before_first_funding(context, add_building) -> None:
    school = add_building("school")

    assert context.funding.is_service_active(school) is True


def test_unregistered_service_is_not_active(context) -> None:
    school = context.placement.create_pending("school", Position())

    assert context.funding.is_service_active(school) is False


def test_missing_treasury_skips_funding(context, add_building) -> None:
    school = add_building("school")
    processor = ServiceFundingProcessor(context.registry, None)

    result = processor.process_daily_costs()

    assert result.total_cost == 0
    assert result.active_services == 0
    assert school.active is True
