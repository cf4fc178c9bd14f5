"""Tests for job_runner.queue module."""

from job_runner.queue import Queue


class TestQueuePush:
    """Tests for Queue.push()."""

    def test_empty_queue(self):
        """Test a freshly created queue."""
        queue = Queue("empty")
        assert queue.name == "empty"
        assert queue.length == 0
        assert len(queue) == 0
        assert queue.current is None
        assert queue.executed == []
        assert queue.list == []

    def test_push_preserves_order(self):
        """Test that pushed items keep call order across calls."""
        queue = Queue()
        queue.push("a", "b")
        queue.push("c")
        assert queue.list == ["a", "b", "c"]
        assert queue.length == 3


class TestQueueNext:
    """Tests for Queue.next()."""

    def test_next_is_fifo(self):
        """Test dequeue order and current cursor."""
        queue = Queue()
        queue.push(1, 2, 3)

        assert queue.next() == 1
        assert queue.current == 1
        assert queue.next() == 2
        assert queue.current == 2
        assert queue.list == [3]
        assert queue.length == 1

    def test_next_on_empty_returns_none(self):
        """Test that next() on an empty queue returns None."""
        queue = Queue()
        assert queue.next() is None
        assert queue.current is None

    def test_next_when_drained_keeps_current(self):
        """Test that an empty next() leaves current and executed unchanged."""
        queue = Queue()
        queue.push("a", "b")
        queue.next()
        queue.next()

        assert queue.next() is None
        assert queue.next() is None
        assert queue.current == "b"
        assert queue.executed == ["a"]

    def test_executed_history(self):
        """Test executed holds every returned element except the latest."""
        queue = Queue()
        queue.push("a", "b", "c")
        returned = []
        while True:
            item = queue.next()
            if item is None:
                break
            returned.append(item)

        assert returned == ["a", "b", "c"]
        assert queue.executed == returned[:-1]

    def test_interleaved_push_and_next(self):
        """Test history with pushes between dequeues."""
        queue = Queue()
        queue.push("a")
        queue.next()
        queue.push("b", "c")
        queue.next()
        queue.next()
        assert queue.executed == ["a", "b"]
        assert queue.current == "c"

    def test_keep_runs_disabled(self):
        """Test that executed stays empty without history retention."""
        queue = Queue("no-history", keep_runs=False)
        queue.push(1, 2, 3)
        queue.next()
        queue.next()
        queue.next()
        assert queue.keep_runs is False
        assert queue.executed == []
        assert queue.current == 3

    def test_falsy_elements_are_dequeued(self):
        """Test that falsy elements are not mistaken for an empty queue."""
        queue = Queue()
        queue.push(0, "", 5)
        assert queue.next() == 0
        assert queue.next() == ""
        assert queue.next() == 5
        assert queue.executed == [0, ""]

    def test_none_element_distinguished_by_is_empty(self):
        """Test that a queued None is told apart from an empty queue via is_empty."""
        queue = Queue()
        assert queue.is_empty is True

        queue.push(None, 7)
        assert queue.is_empty is False
        assert queue.next() is None
        assert queue.length == 1
        assert queue.current is None

        assert queue.next() == 7
        assert queue.executed == [None]
        assert queue.is_empty is True
        assert queue.next() is None
        assert queue.current == 7

    def test_accessors_return_copies(self):
        """Test that mutating accessor results does not change the queue."""
        queue = Queue()
        queue.push(1, 2)
        queue.next()
        queue.list.append(99)
        queue.executed.append(99)
        assert queue.list == [2]
        assert queue.executed == []
