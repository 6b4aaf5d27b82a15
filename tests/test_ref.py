from __future__ import annotations

import pytest

from pureio import EffectNode, Ref, fail, ref, replicate_m_, run, unit


def test_ref_allocation_is_deferred():
    node = ref(0)
    first = run(node)
    second = run(node)
    assert isinstance(first, Ref)
    assert first is not second
    assert first.ref_id != second.ref_id


def test_get_set_modify():
    def program(cell: Ref[int]) -> EffectNode[tuple[int, int, int]]:
        return cell.get().flat_map(
            lambda before: cell.set(10).then(
                cell.modify(lambda x: x + 5).flat_map(
                    lambda modified: cell.get().map(lambda after: (before, modified, after))
                )
            )
        )

    assert run(ref(3).flat_map(program)) == (3, 15, 15)


def test_five_doublings():
    program = ref(1).flat_map(
        lambda cell: replicate_m_(5, cell.modify(lambda x: x * 2)).then(cell.get())
    )
    assert run(program) == 32


def test_building_accessors_does_not_touch_cell():
    cell = run(ref(7))
    cell.set(100)
    cell.modify(lambda x: x * 2)
    assert run(cell.get()) == 7


def test_writes_persist_after_failure():
    cell = run(ref(0))
    program = cell.set(1).then(fail(RuntimeError("boom"))).then(cell.set(2))
    with pytest.raises(RuntimeError):
        run(program)
    assert run(cell.get()) == 1


def test_modify_rejects_non_callable():
    cell = run(ref(0))
    with pytest.raises(TypeError):
        cell.modify(1)  # type: ignore[arg-type]


def test_repr_names_cell():
    cell = run(ref(None))
    assert repr(cell) == f"Ref#{cell.ref_id}"
    assert repr(cell.get()) == f"Delay(Ref#{cell.ref_id}.get)"


def test_refs_are_independent():
    program = ref(0).flat_map(
        lambda a: ref(0).flat_map(
            lambda b: a.set(1).then(b.set(2)).then(a.get() ** b.get())
        )
    )
    assert run(program) == (1, 2)


def test_modify_failure_leaves_value():
    cell = run(ref(5))

    def explode(_: int) -> int:
        raise ArithmeticError("nope")

    with pytest.raises(ArithmeticError):
        run(cell.modify(explode))
    assert run(cell.get().flat_map(lambda v: unit(v))) == 5
