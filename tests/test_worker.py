import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from sakura.services.completion_service import CompletionGateway
from sakura.services.conversation_service import ConversationStore
from sakura.services.fallback_service import GRATITUDE_RESPONSE, RESPONSES
from sakura.services.job_queue import Job, JobQueue
from sakura.services.worker import ReplyWorker
from sakura.services.worker_state import WorkerState


def _fallback_worker(delivery):
    store = ConversationStore()
    return ReplyWorker(JobQueue(), CompletionGateway(None, store), delivery), store


class TestDrainCycle:
    def test_three_users_replied_in_order_with_fallback(self, delivery):
        worker, store = _fallback_worker(delivery)

        async def scenario():
            worker.enqueue(Job(user_id="A", text="早安"))
            worker.enqueue(Job(user_id="B", text="谢谢"))
            worker.enqueue(Job(user_id="C", text="我今天去了公園"))
            await worker.wait_idle()

        asyncio.run(scenario())

        assert [target.user_id for target, _ in delivery.sent] == ["A", "B", "C"]
        assert all(target.reply_token is None for target, _ in delivery.sent)
        assert delivery.sent[0][1] in RESPONSES["morning"]
        assert delivery.sent[1][1] == GRATITUDE_RESPONSE
        assert delivery.sent[2][1] in RESPONSES["default"]
        assert len(store) == 0
        assert worker.state is WorkerState.IDLE

    def test_fifo_for_many_jobs(self, delivery):
        worker, _ = _fallback_worker(delivery)
        users = [f"U{i}" for i in range(20)]

        async def scenario():
            for user in users:
                worker.enqueue(Job(user_id=user, text="hello"))
            await worker.wait_idle()

        asyncio.run(scenario())

        assert [target.user_id for target, _ in delivery.sent] == users

    def test_only_one_job_in_flight(self, delivery):
        in_flight = 0
        max_in_flight = 0

        async def complete(user_id, text):
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.001)
            in_flight -= 1
            return text

        gateway = Mock(ai_enabled=True)
        gateway.complete = complete
        worker = ReplyWorker(JobQueue(), gateway, delivery)

        async def scenario():
            worker.enqueue(Job(user_id="A", text="1"))
            first_task = worker._task
            await asyncio.sleep(0)
            worker.enqueue(Job(user_id="B", text="2"))
            worker.enqueue(Job(user_id="C", text="3"))
            assert worker._task is first_task
            assert worker.state is WorkerState.DRAINING
            await worker.wait_idle()

        asyncio.run(scenario())

        assert max_in_flight == 1
        assert [text for _, text in delivery.sent] == ["1", "2", "3"]

    def test_restarts_after_going_idle(self, delivery):
        worker, _ = _fallback_worker(delivery)

        async def scenario():
            worker.enqueue(Job(user_id="A", text="hi"))
            await worker.wait_idle()
            assert worker.state is WorkerState.IDLE
            worker.enqueue(Job(user_id="B", text="hi"))
            assert worker.state is WorkerState.DRAINING
            await worker.wait_idle()

        asyncio.run(scenario())

        assert [target.user_id for target, _ in delivery.sent] == ["A", "B"]
        assert worker.state is WorkerState.IDLE


class TestFaultIsolation:
    def test_failing_job_does_not_stop_the_loop(self, delivery):
        async def complete(user_id, text):
            if user_id == "bad":
                raise RuntimeError("unexpected")
            return "ok"

        gateway = Mock(ai_enabled=False)
        gateway.complete = complete
        worker = ReplyWorker(JobQueue(), gateway, delivery)

        async def scenario():
            worker.enqueue(Job(user_id="A", text="x"))
            worker.enqueue(Job(user_id="bad", text="x"))
            worker.enqueue(Job(user_id="C", text="x"))
            await worker.wait_idle()

        asyncio.run(scenario())

        assert [target.user_id for target, _ in delivery.sent] == ["A", "C"]
        assert worker.state is WorkerState.IDLE

    def test_delivery_failure_drops_job_and_continues(self, make_delivery):
        delivery = make_delivery(fail_for=("A",))
        worker, _ = _fallback_worker(delivery)

        async def scenario():
            worker.enqueue(Job(user_id="A", text="hi"))
            worker.enqueue(Job(user_id="B", text="hi"))
            await worker.wait_idle()

        asyncio.run(scenario())

        assert [target.user_id for target, _ in delivery.sent] == ["A", "B"]
        assert len(worker.queue) == 0
        assert worker.state is WorkerState.IDLE

    def test_delivery_raising_is_caught(self):
        delivery = Mock()
        delivery.send = AsyncMock(side_effect=[RuntimeError("socket closed"), Mock(ok=True)])
        worker, _ = _fallback_worker(delivery)

        async def scenario():
            worker.enqueue(Job(user_id="A", text="hi"))
            worker.enqueue(Job(user_id="B", text="hi"))
            await worker.wait_idle()

        asyncio.run(scenario())

        assert delivery.send.await_count == 2
        assert worker.state is WorkerState.IDLE

    def test_cancelled_before_start_returns_to_idle(self, delivery):
        worker, _ = _fallback_worker(delivery)

        async def scenario():
            worker.enqueue(Job(user_id="A", text="hi"))
            worker._task.cancel()
            await worker.wait_idle()

        asyncio.run(scenario())

        assert worker.state is WorkerState.IDLE
        assert delivery.sent == []
        assert len(worker.queue) == 1

    def test_cancelled_mid_cycle_returns_to_idle(self, delivery):
        started = None

        async def complete(user_id, text):
            started.set()
            await asyncio.sleep(10)
            return text

        gateway = Mock(ai_enabled=False)
        gateway.complete = complete
        worker = ReplyWorker(JobQueue(), gateway, delivery)

        async def scenario():
            nonlocal started
            started = asyncio.Event()
            worker.enqueue(Job(user_id="A", text="hi"))
            await started.wait()
            worker._task.cancel()
            await worker.wait_idle()

        asyncio.run(scenario())

        assert worker.state is WorkerState.IDLE

    def test_enqueue_outside_event_loop_stays_idle(self, delivery):
        worker, _ = _fallback_worker(delivery)

        with pytest.raises(RuntimeError):
            worker.enqueue(Job(user_id="A", text="hi"))

        assert worker.state is WorkerState.IDLE
        assert len(worker.queue) == 1
