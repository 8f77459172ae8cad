import random
import unittest

from catan_generator.domain.random_queue import RandomQueue


class FixedIndexes:
    """randrange stub returning scripted indexes, then always 0."""

    def __init__(self, *indexes: int) -> None:
        self.indexes = list(indexes)
        self.calls = []

    def randrange(self, stop: int) -> int:
        self.calls.append(stop)
        index = self.indexes.pop(0) if self.indexes else 0
        assert 0 <= index < stop
        return index


class RandomQueueTests(unittest.TestCase):
    def test_pop_uses_rng_index(self) -> None:
        queue = RandomQueue(["a", "b", "c"], rng=FixedIndexes(2, 0))
        self.assertEqual(queue.pop(), "c")
        self.assertEqual(queue.pop(), "a")
        self.assertEqual(queue.values, ["b"])

    def test_pop_on_empty_queue_returns_none(self) -> None:
        queue = RandomQueue([], rng=FixedIndexes())
        self.assertIsNone(queue.pop())
        self.assertIsNone(queue.peek())
        self.assertTrue(queue.is_empty())

    def test_peek_returns_the_next_pop(self) -> None:
        queue = RandomQueue([1, 2, 3, 4], rng=random.Random(3))
        for _ in range(4):
            peeked = queue.peek()
            self.assertEqual(queue.peek(), peeked)
            self.assertEqual(queue.pop(), peeked)

    def test_mutation_invalidates_peeked_index(self) -> None:
        rng = FixedIndexes(1, 0)
        queue = RandomQueue(["a", "b"], rng=rng)
        self.assertEqual(queue.peek(), "b")
        queue.remove("a")
        self.assertEqual(queue.pop(), "b")
        self.assertEqual(rng.calls, [2, 1])

    def test_duplicates_are_weighted_by_count(self) -> None:
        queue = RandomQueue(["x", "x", "x", "y"], rng=random.Random(11))
        popped = [queue.pop() for _ in range(4)]
        self.assertEqual(sorted(popped), ["x", "x", "x", "y"])
        self.assertEqual(queue.count("x"), 0)

    def test_remove_takes_a_single_instance(self) -> None:
        queue = RandomQueue(["x", "x", "y"])
        self.assertTrue(queue.remove("x"))
        self.assertEqual(queue.count("x"), 1)
        self.assertFalse(queue.remove("z"))
        self.assertEqual(len(queue), 2)

    def test_pop_excluding_skips_values(self) -> None:
        queue = RandomQueue(["a", "b", "a", "c"], rng=random.Random(5))
        self.assertEqual(queue.pop_excluding("a", "b"), "c")
        self.assertIsNone(queue.pop_excluding("a", "b"))
        self.assertEqual(sorted(queue.values), ["a", "a", "b"])

    def test_pop_one_of_only_returns_listed_values(self) -> None:
        queue = RandomQueue(["a", "b", "c"], rng=random.Random(1))
        self.assertEqual(queue.pop_one_of("b"), "b")
        self.assertIsNone(queue.pop_one_of("b"))
        self.assertIsNone(queue.pop_one_of())
        self.assertEqual(len(queue), 2)

    def test_pop_avoiding_falls_back_to_any_value(self) -> None:
        queue = RandomQueue(["a"], rng=random.Random(1))
        self.assertEqual(queue.pop_avoiding("a"), "a")
        self.assertTrue(queue.is_empty())

    def test_filter_returns_independent_queue(self) -> None:
        queue = RandomQueue([1, 2, 3, 4])
        evens = queue.filter(lambda value: value % 2 == 0)
        evens.pop()
        self.assertEqual(len(evens), 1)
        self.assertEqual(len(queue), 4)
        self.assertEqual(sorted(queue.filter_by(3, 4, 5).values), [3, 4])

    def test_copy_does_not_share_values(self) -> None:
        queue = RandomQueue(["a", "b"])
        copied = queue.copy()
        copied.push("c")
        self.assertNotIn("c", queue)
        self.assertIn("c", copied)

    def test_seeded_queues_are_reproducible(self) -> None:
        first = RandomQueue(range(20), rng=random.Random(42))
        second = RandomQueue(range(20), rng=random.Random(42))
        self.assertEqual([first.pop() for _ in range(20)], [second.pop() for _ in range(20)])


if __name__ == "__main__":
    unittest.main()
