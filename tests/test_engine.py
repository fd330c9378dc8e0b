"""
Fibonacci engine tests
"""
import os
import sys
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from fibcalc.engine import MAX_INDEX, check_index, create_executor, fibonacci, fibonacci_pair
from fibcalc.errors import FibonacciError, IndexOutOfRange


def naive_fibonacci_list(count):
    values = [0, 1]
    while len(values) < count:
        values.append(values[-1] + values[-2])
    return values[:count]


class CountingExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that records how many tasks were submitted"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        return super().submit(fn, *args, **kwargs)


class TestFibonacciValues:
    """Values against independently computed references"""

    @pytest.fixture(scope="class")
    def reference(self):
        return naive_fibonacci_list(2001)

    def test_known_values(self):
        assert fibonacci(0) == 0
        assert fibonacci(1) == 1
        assert fibonacci(2) == 1
        assert fibonacci(10) == 55
        assert fibonacci(20) == 6765

    def test_first_fifty_match_linear_recurrence(self, reference):
        for n in range(51):
            assert fibonacci(n) == reference[n], n

    def test_recurrence_holds(self, reference):
        for n in range(2, 300):
            assert fibonacci(n) == reference[n - 1] + reference[n - 2]

    def test_hundredth(self):
        assert fibonacci(100) == 354224848179261915075

    def test_thousandth(self, reference):
        value = fibonacci(1000)
        assert value == reference[1000]
        assert len(str(value)) == 209
        assert str(value).startswith("43466")

    def test_sparse_large_indices(self, reference):
        for n in (511, 512, 513, 1023, 1024, 1999, 2000):
            assert fibonacci(n) == reference[n]

    def test_pair(self):
        assert fibonacci_pair(0) == (0, 1)
        assert fibonacci_pair(10) == (55, 89)
        assert fibonacci_pair(99) == (218922995834555169026, 354224848179261915075)

    def test_never_negative(self):
        for n in range(0, 500, 7):
            assert fibonacci(n) >= 0


class TestIndexValidation:
    """Input domain boundaries"""

    def test_negative_index(self):
        with pytest.raises(IndexOutOfRange):
            fibonacci(-1)

    def test_index_above_64_bits(self):
        with pytest.raises(IndexOutOfRange) as excinfo:
            check_index(MAX_INDEX + 1)
        assert excinfo.value.maximum == MAX_INDEX
        assert isinstance(excinfo.value, FibonacciError)
        assert isinstance(excinfo.value, ValueError)

    def test_max_index_accepted(self):
        assert check_index(MAX_INDEX) == MAX_INDEX

    @pytest.mark.parametrize("value", [1.5, "10", None, True])
    def test_non_integer_index(self, value):
        with pytest.raises(TypeError):
            fibonacci(value)

    def test_negative_parallel_min_bits(self):
        with pytest.raises(ValueError):
            fibonacci(10, parallel_min_bits=-1)


class TestParallelFanOut:
    """Fork-join evaluation of the doubling products"""

    def test_two_tasks_per_level(self):
        with CountingExecutor(max_workers=2) as executor:
            value = fibonacci(1000, executor=executor, parallel_min_bits=0)
        assert value == naive_fibonacci_list(1001)[1000]
        # 1000 has 10 bits, one level per bit
        assert executor.submitted == 2 * (1000).bit_length()

    def test_small_operands_stay_inline(self):
        with CountingExecutor(max_workers=2) as executor:
            value = fibonacci(1000, executor=executor, parallel_min_bits=1 << 20)
        assert value == naive_fibonacci_list(1001)[1000]
        assert executor.submitted == 0

    def test_cutoff_only_affects_upper_levels(self):
        with CountingExecutor(max_workers=2) as executor:
            fibonacci(1000, executor=executor, parallel_min_bits=200)
        assert 0 < executor.submitted < 2 * (1000).bit_length()

    def test_caller_executor_left_running(self):
        executor = ThreadPoolExecutor(max_workers=2)
        try:
            fibonacci(300, executor=executor, parallel_min_bits=0)
            assert executor.submit(lambda: 42).result() == 42
        finally:
            executor.shutdown()

    def test_thread_pool_created_per_call(self):
        expected = naive_fibonacci_list(5001)[5000]
        assert fibonacci(5000, parallel_min_bits=0, executor_kind="thread") == expected

    def test_single_worker_does_not_deadlock(self):
        with ThreadPoolExecutor(max_workers=1) as executor:
            assert fibonacci(2000, executor=executor, parallel_min_bits=0) == fibonacci(2000)

    def test_process_pool_matches_inline(self):
        with ProcessPoolExecutor(max_workers=2) as executor:
            parallel = fibonacci(3000, executor=executor, parallel_min_bits=0)
        assert parallel == fibonacci(3000)

    def test_create_executor_kinds(self):
        with create_executor("thread", 3) as executor:
            assert isinstance(executor, ThreadPoolExecutor)
        with pytest.raises(ValueError):
            create_executor("fiber")
