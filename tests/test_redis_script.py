"""Runs the increment script through fakeredis's embedded Lua interpreter."""

import time
from concurrent.futures import ThreadPoolExecutor

import fakeredis
import pytest

from rate_guard.adapters.rate_limit.redis_store import RedisCounterStore
from rate_guard.services.limit_evaluator import LimitEvaluator


@pytest.fixture
def redis_client() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def evaluator(redis_client: fakeredis.FakeRedis) -> LimitEvaluator:
    return LimitEvaluator(RedisCounterStore(redis_client))


def test_counts_and_rejects_past_limit(evaluator: LimitEvaluator, redis_client: fakeredis.FakeRedis) -> None:
    decisions = [evaluator.evaluate("rate_limit:127.0.0.1-op", 5, 3) for _ in range(4)]

    assert [(d.current_count, d.admitted) for d in decisions] == [(1, True), (2, True), (3, True), (4, False)]
    assert redis_client.get("rate_limit:127.0.0.1-op") == "4"


def test_expiry_set_on_first_hit_only(evaluator: LimitEvaluator, redis_client: fakeredis.FakeRedis) -> None:
    evaluator.evaluate("rate_limit:k", 5, 3)
    redis_client.expire("rate_limit:k", 2)

    # Later hits keep the shortened TTL instead of re-arming the full window.
    evaluator.evaluate("rate_limit:k", 5, 3)

    assert 0 < redis_client.ttl("rate_limit:k") <= 2


def test_first_hit_gets_window_ttl(evaluator: LimitEvaluator, redis_client: fakeredis.FakeRedis) -> None:
    evaluator.evaluate("rate_limit:k", 5, 3)

    assert redis_client.ttl("rate_limit:k") == 5


def test_counter_without_ttl_is_rearmed(evaluator: LimitEvaluator, redis_client: fakeredis.FakeRedis) -> None:
    redis_client.set("rate_limit:k", 3)

    decision = evaluator.evaluate("rate_limit:k", 5, 10)

    assert decision.current_count == 4
    assert redis_client.ttl("rate_limit:k") == 5


def test_key_is_fresh_after_window_elapses(evaluator: LimitEvaluator) -> None:
    for _ in range(4):
        evaluator.evaluate("rate_limit:k", 1, 3)

    time.sleep(1.2)
    decision = evaluator.evaluate("rate_limit:k", 1, 3)

    assert decision.admitted is True
    assert decision.current_count == 1


def test_concurrent_evaluations_lose_no_updates(
    evaluator: LimitEvaluator, redis_client: fakeredis.FakeRedis
) -> None:
    total, limit = 50, 7

    with ThreadPoolExecutor(max_workers=16) as pool:
        decisions = list(pool.map(lambda _: evaluator.evaluate("rate_limit:hot", 60, limit), range(total)))

    assert sum(d.admitted for d in decisions) == limit
    assert sorted(d.current_count for d in decisions) == list(range(1, total + 1))
    assert redis_client.get("rate_limit:hot") == str(total)
