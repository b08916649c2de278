from dataclasses import dataclass, field

import pytest

from forestgen import InvalidTopologyError, SortMark, VigorAllocator, split_vigor, topological_sort


@dataclass(eq=False)
class Entity:
    id: int
    light_exposure: float = 0.0
    vigor: float = 0.0
    sort_mark: SortMark = SortMark.NONE
    children: list = field(default_factory=list)


def children_of(entity):
    return entity.children


def test_topological_sort_puts_children_before_parents():
    leaf_a, leaf_b = Entity(2), Entity(3)
    middle = Entity(1, children=[leaf_a, leaf_b])
    root = Entity(0, children=[middle])

    order = topological_sort(root, children_of)

    assert [entity.id for entity in order] == [2, 3, 1, 0]
    assert all(entity.sort_mark == SortMark.NONE for entity in order)


def test_shared_child_is_visited_once():
    shared = Entity(3)
    root = Entity(0, children=[Entity(1, children=[shared]), Entity(2, children=[shared])])

    order = topological_sort(root, children_of)

    assert [entity.id for entity in order] == [3, 1, 2, 0]


def test_cycle_raises_and_resets_marks():
    first, second = Entity(0), Entity(1)
    first.children.append(second)
    second.children.append(first)

    with pytest.raises(InvalidTopologyError):
        topological_sort(first, children_of)

    assert first.sort_mark == SortMark.NONE
    assert second.sort_mark == SortMark.NONE


def test_single_child_receives_all_vigor():
    child = Entity(1, light_exposure=0.5)
    root = Entity(0, light_exposure=0.3, children=[child])

    VigorAllocator(0.5, children_of).allocate(root)

    assert root.light_exposure == pytest.approx(0.8)
    assert root.vigor == pytest.approx(0.8)
    assert child.vigor == pytest.approx(root.vigor)


def test_main_and_lateral_vigor_add_up_to_parent_vigor():
    main = Entity(1, light_exposure=0.5)
    lateral = Entity(2, light_exposure=0.3)
    root = Entity(0, light_exposure=0.2, children=[lateral, main])

    VigorAllocator(0.7, children_of).allocate(root)

    assert main.vigor > lateral.vigor
    assert main.vigor + lateral.vigor == pytest.approx(root.vigor)
    expected_main = 1.0 * (0.7 * 0.5) / (0.7 * 0.5 + 0.3 * 0.5)
    assert main.vigor == pytest.approx(expected_main)


def test_laterals_share_the_same_vigor():
    main = Entity(1, light_exposure=0.5)
    laterals = [Entity(2, light_exposure=0.3), Entity(3, light_exposure=0.4)]
    root = Entity(0, light_exposure=0.2, children=[*laterals, main])

    VigorAllocator(0.6, children_of).allocate(root)

    assert laterals[0].vigor == pytest.approx(laterals[1].vigor)
    assert main.vigor + laterals[0].vigor == pytest.approx(root.vigor)


def test_root_vigor_cap():
    root = Entity(0, light_exposure=1.0, children=[Entity(1, light_exposure=1.0)])

    VigorAllocator(0.5, children_of).allocate(root, root_vigor_cap=0.5)

    assert root.light_exposure == pytest.approx(2.0)
    assert root.vigor == pytest.approx(0.5)
    assert root.children[0].vigor == pytest.approx(0.5)


def test_split_without_main_exposure_goes_to_laterals():
    assert split_vigor(2.0, 0.0, 1.0, 0.9) == (0.0, 2.0)


def test_split_with_zero_denominator_falls_back_to_zero():
    main_vigor, lateral_vigor = split_vigor(2.0, 1.0, 1.0, 0.0)

    assert main_vigor == 0.0
    assert lateral_vigor == 2.0


def test_apical_control_increases_main_share():
    shares = [split_vigor(1.0, 0.4, 1.0, apical)[0] for apical in (0.1, 0.3, 0.5, 0.7, 0.9, 1.0)]

    assert all(earlier < later for earlier, later in zip(shares, shares[1:]))
