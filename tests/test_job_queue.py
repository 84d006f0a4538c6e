from datetime import datetime, timezone

from sakura.services.job_queue import Job, JobQueue


class TestJob:
    def test_enqueued_at_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        job = Job(user_id="U1", text="早安")
        assert before <= job.enqueued_at <= datetime.now(timezone.utc)


class TestJobQueue:
    def test_pop_empty_returns_none(self):
        assert JobQueue().pop() is None

    def test_fifo_order(self):
        queue = JobQueue()
        jobs = [Job(user_id=f"U{i}", text=str(i)) for i in range(5)]
        for job in jobs:
            queue.push(job)

        popped = []
        while queue:
            popped.append(queue.pop())

        assert popped == jobs
        assert len(queue) == 0
