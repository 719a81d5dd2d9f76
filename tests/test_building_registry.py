"""BuildingRegistry: registration order, category lists and ground-plane queries."""

import pytest

from buildings.building import BuildingCategory, Position, Service, create_building
from buildings.registry import BuildingRegistry
from simulation.events import BuildingRegistered, BuildingUnregistered, EventBus


def _snapshot(registry: BuildingRegistry) -> tuple:
    return (
        len(registry),
        tuple(registry.count(category) for category in BuildingCategory),
        tuple(b.unique_id for b in registry.in_radius(Position(), 50.0)),
        tuple(b.unique_id for b in registry.by_category("commercial")),
    )


def test_registration_keeps_category_order(context, add_building) -> None:
    first = add_building("shop")
    house = add_building("house")
    second = add_building("shop", x=3.0)

    registry = context.registry
    assert registry.by_category(BuildingCategory.COMMERCIAL) == (first, second)
    assert registry.by_category("house") == (house,)
    assert registry.count("commercial") == 2
    assert registry.all_buildings() == (first, house, second)
    assert len(registry) == 3


def test_double_registration_is_rejected(context, add_building) -> None:
    shop = add_building("shop")

    assert context.registry.register(shop) is False
    assert context.registry.count("commercial") == 1


def test_identity_clash_is_rejected(context, sim_config) -> None:
    registry = context.registry
    template = sim_config.catalog["house"]
    original = create_building("same", template, Position())
    impostor = create_building("same", template, Position(1.0, 0.0, 1.0))

    assert registry.register(original) is True
    assert registry.register(impostor) is False
    assert registry.get("same") is original
    assert impostor not in registry


def test_unregister_unknown_building_returns_false(context, sim_config) -> None:
    stray = create_building("stray", sim_config.catalog["road"], Position())

    assert context.registry.unregister(stray) is False


def test_unknown_category_yields_empty_results(context, add_building) -> None:
    add_building("house")

    assert context.registry.by_category("castle") == ()
    assert context.registry.count("castle") == 0


def test_in_radius_ignores_height(context, add_building) -> None:
    tower = add_building("house")
    tower.position = Position(3.0, 100.0, 4.0)
    outside = add_building("house", x=3.0, z=4.1)

    found = context.registry.in_radius(Position(), 5.0)

    assert tower in found
    assert outside not in found


def test_in_radius_filters_by_category(context, add_building) -> None:
    house = add_building("house", x=1.0)
    add_building("shop", x=1.0)

    assert context.registry.in_radius(Position(), 5.0, BuildingCategory.HOUSE) == [house]


@pytest.mark.parametrize("radius", [0.0, -3.0])
def test_non_positive_radius_covers_nothing(context, add_building, radius) -> None:
    add_building("house")

    assert context.registry.in_radius(Position(), radius) == []


def test_closest_returns_nearest_first(context, add_building) -> None:
    far = add_building("house", x=9.0)
    near = add_building("house", x=1.0)
    middle = add_building("house", x=4.0)

    assert context.registry.closest(Position(), "house", 2) == [near, middle]
    assert context.registry.closest(Position(), "house", 10) == [near, middle, far]
    assert context.registry.closest(Position(), "house", 0) == []


def test_register_then_unregister_restores_queries(context, add_building, sim_config) -> None:
    add_building("house", x=1.0)
    add_building("shop", x=2.0)
    before = _snapshot(context.registry)

    extra = create_building("extra", sim_config.catalog["shop"], Position(1.0, 0.0, 1.0))
    assert context.registry.register(extra)
    assert _snapshot(context.registry) != before

    assert context.registry.unregister(extra)
    assert _snapshot(context.registry) == before


def test_clear_drops_everything(context, add_building) -> None:
    add_building("house")
    add_building("school")

    context.registry.clear()

    assert len(context.registry) == 0
    assert context.registry.by_category("service") == ()


def test_next_id_skips_taken_identities(sim_config) -> None:
    registry = BuildingRegistry("b")
    registry.register(create_building("b1", sim_config.catalog["road"], Position()))

    first = registry.next_id()
    second = registry.next_id()

    assert first == "b2"
    assert second == "b3"


def test_registry_publishes_membership_events(sim_config) -> None:
    events = EventBus()
    seen: list = []
    events.subscribe(BuildingRegistered, seen.append)
    events.subscribe(BuildingUnregistered, seen.append)
    registry = BuildingRegistry(events=events)
    school = create_building("s1", sim_config.catalog["school"], Position())

    registry.register(school)
    registry.unregister(school)

    assert seen == [
        BuildingRegistered("s1", "service"),
        BuildingUnregistered("s1", "service"),
    ]
    assert isinstance(school, Service)


def test_can_register_matches_register(context, sim_config) -> None:
    template = sim_config.catalog["house"]
    first = create_building("lot", template, Position())
    clash = create_building("lot", template, Position(2.0, 0.0, 0.0))

    assert context.registry.can_register(first) is True
    context.registry.register(first)

    assert context.registry.can_register(first) is False
    assert context.registry.can_register(clash) is False
    assert len(context.registry) == 1
