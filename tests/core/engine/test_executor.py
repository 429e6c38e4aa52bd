# tests/core/engine/test_executor.py
"""
Testes dos drivers de rotina (bloqueante e assíncrono).

Os testes asseguram que:
- a mesma rotina produz o mesmo valor nos dois drivers
- `Gather` devolve resultados na ordem de declaração, não de conclusão
- exceções de passos são relançadas dentro da rotina
- em fan-out, a exceção propagada é a da primeira sub-rotina declarada
"""

import time

import pytest

from bem_config.core.engine.executor import call, gather, run_async, run_sync


def _slow_identity(value, delay):
    time.sleep(delay)
    return value


def _leaf(value, delay=0.0):
    result = yield call(_slow_identity, value, delay)
    return result


def _fan_out():
    # a primeira sub-rotina termina por último
    values = yield gather([_leaf("a", 0.05), _leaf("b", 0.0), _leaf("c", 0.01)])
    return "".join(values)


def _boom(message):
    raise ValueError(message)


def _failing(message, delay=0.0):
    yield call(time.sleep, delay)
    yield call(_boom, message)
    return "unreachable"


def _recovering():
    try:
        yield call(_boom, "step failed")
    except ValueError as e:
        return f"recovered: {e}"


def test_run_sync_fan_out_keeps_declaration_order():
    assert run_sync(_fan_out()) == "abc"


@pytest.mark.asyncio
async def test_run_async_fan_out_keeps_declaration_order():
    assert await run_async(_fan_out()) == "abc"


def test_errors_are_thrown_into_the_routine_sync():
    assert run_sync(_recovering()) == "recovered: step failed"


@pytest.mark.asyncio
async def test_errors_are_thrown_into_the_routine_async():
    assert await run_async(_recovering()) == "recovered: step failed"


def _two_failures():
    values = yield gather([_failing("first", 0.05), _failing("second", 0.0)])
    return values


def test_first_declared_error_wins_sync():
    with pytest.raises(ValueError, match="first"):
        run_sync(_two_failures())


@pytest.mark.asyncio
async def test_first_declared_error_wins_async():
    with pytest.raises(ValueError, match="first"):
        await run_async(_two_failures())


def test_empty_gather():
    def routine():
        values = yield gather([])
        return values

    assert run_sync(routine()) == []


def test_unknown_step_is_rejected():
    def routine():
        yield "not a step"

    with pytest.raises(TypeError):
        run_sync(routine())
